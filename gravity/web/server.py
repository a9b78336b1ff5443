"""
FastAPI web server — lays out JSON documents on request.

The server is stateless: each request carries the whole document, and
the response carries the laid-out document plus the per-group result.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from gravity.config import ConfigurationError, configuration_to_dict, parse_configuration
from gravity.layout import layout, layout_result_to_dict
from gravity.tree import TreeError, parse_tree, tree_to_dict, validate_tree

log = logging.getLogger(__name__)

# ── App ────────────────────────────────────────────────────────────

app = FastAPI(title="Gravity")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Request models ─────────────────────────────────────────────────

class LayoutRequest(BaseModel):
    document: dict
    options: dict | None = None
    validate_first: bool = True


class ValidateRequest(BaseModel):
    document: dict


# ── Routes ─────────────────────────────────────────────────────────

@app.get("/api/health")
def health():
    return {"status": "ok"}


@app.post("/api/validate")
def validate_document(req: ValidateRequest):
    """Check a document without laying it out."""
    try:
        tree, root = parse_tree(req.document)
    except TreeError as e:
        raise HTTPException(422, str(e))
    errors = validate_tree(tree, root)
    return {"valid": not errors, "errors": errors}


@app.post("/api/layout")
def layout_document(req: LayoutRequest):
    """Run one layout pass and return the updated document.

    Groups that fail are listed under ``result.errors``; the request
    itself still succeeds.
    """
    try:
        config = parse_configuration(req.options)
        tree, root = parse_tree(req.document)
    except (ConfigurationError, TreeError) as e:
        raise HTTPException(422, str(e))

    if req.validate_first:
        errors = validate_tree(tree, root)
        if errors:
            raise HTTPException(422, {"message": "Invalid document", "errors": errors})

    result = layout(tree, root, config)
    if not result.ok:
        log.warning("Layout finished with %d failed group(s)", len(result.errors))

    return {
        "document": tree_to_dict(tree, root),
        "options": configuration_to_dict(config),
        "result": layout_result_to_dict(result),
    }


# ── Entry point ────────────────────────────────────────────────────

def main(host: str = "127.0.0.1", port: int = 8000):
    import uvicorn
    uvicorn.run("gravity.web.server:app", host=host, port=port, reload=False)


if __name__ == "__main__":
    main()
