"""Layout result serialization — JSON conversion."""

from __future__ import annotations

from dataclasses import asdict

from .models import LayoutResult


def layout_result_to_dict(result: LayoutResult) -> dict:
    """Serialize a LayoutResult to a JSON-safe dict."""
    return {
        "root": result.root,
        "ok": result.ok,
        **({"attractor": asdict(result.attractor)} if result.attractor else {}),
        "groups": [
            {
                "parent": g.group.parent,
                "metrics": asdict(g.metrics),
                "children": [
                    {
                        "handle": c.handle,
                        "width": c.width,
                        "height": c.height,
                        "force": c.force,
                        "center": asdict(c.center),
                        "margin": asdict(c.margin),
                        **({"text_align": c.text_align} if c.text_align else {}),
                        **({"clamped": True} if c.clamped else {}),
                    }
                    for c in g.children
                ],
            }
            for g in result.groups
        ],
        "errors": [
            {"parent": e.parent, "step": e.step.value, "reason": e.reason}
            for e in result.errors
        ],
    }
