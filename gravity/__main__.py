"""
Gravity — entry point.

Usage:
    python -m gravity layout page.json                 # print laid-out document
    python -m gravity layout page.json --config opts.json --out result.json
    python -m gravity serve                            # start web server on :8000
    python -m gravity serve --port 3000
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from gravity.config import ConfigurationError, parse_configuration
from gravity.layout import layout, layout_result_to_dict
from gravity.tree import TreeError, parse_tree, tree_to_dict, validate_tree


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="gravity", description="Gravity layout for JSON element documents")
    p.add_argument("-v", "--verbose", action="store_true", help="Log per-group details")
    sub = p.add_subparsers(dest="cmd", required=True)

    lo = sub.add_parser("layout", help="Lay out a document and write the result")
    lo.add_argument("document", help="Path to the document JSON")
    lo.add_argument("--config", default=None, help="Path to an options JSON (gravitation, k, density)")
    lo.add_argument("--out", default=None, help="Output path (default: stdout)")
    lo.add_argument("--no-validate", action="store_true", help="Skip document validation")

    sv = sub.add_parser("serve", help="Start the web API server")
    sv.add_argument("--host", default="127.0.0.1", help="Host to bind")
    sv.add_argument("--port", type=int, default=8000, help="Port to bind")

    return p


def run_layout(args: argparse.Namespace) -> int:
    try:
        document = json.loads(Path(args.document).read_text(encoding="utf-8"))
        options = (json.loads(Path(args.config).read_text(encoding="utf-8"))
                   if args.config else None)
        config = parse_configuration(options)
        tree, root = parse_tree(document)
    except (OSError, json.JSONDecodeError, ConfigurationError, TreeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if not args.no_validate:
        errors = validate_tree(tree, root)
        if errors:
            for err in errors:
                print(f"Invalid document: {err}", file=sys.stderr)
            return 2

    result = layout(tree, root, config)
    payload = {
        "document": tree_to_dict(tree, root),
        "result": layout_result_to_dict(result),
    }
    text = json.dumps(payload, indent=2)
    if args.out:
        Path(args.out).write_text(text, encoding="utf-8")
        print(f"Laid out {len(result.groups)} group(s) -> {args.out}")
    else:
        print(text)

    for err in result.errors:
        print(f"Group #{err.parent} failed at {err.step.value}: {err.reason}", file=sys.stderr)
    return 0 if result.ok else 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "layout":
        return run_layout(args)

    if args.cmd == "serve":
        from gravity.web.server import main as serve_main
        serve_main(host=args.host, port=args.port)
        return 0

    return 2


if __name__ == "__main__":
    sys.exit(main())
