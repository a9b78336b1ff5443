"""Document serialization — convert an ElementTree back to JSON-safe dicts."""

from __future__ import annotations

from dataclasses import asdict

from .models import ElementTree


def tree_to_dict(tree: ElementTree, root: int) -> dict:
    """Serialize the subtree at *root* in the format ``parse_tree`` reads."""
    el = tree.get(root)
    return {
        **({"name": el.name} if el.name else {}),
        **({"box": asdict(el.box)} if el.box is not None else {}),
        "style": asdict(el.style),
        **({"classes": list(el.classes)} if el.classes else {}),
        **({"rendered": False} if not el.rendered else {}),
        "children": [tree_to_dict(tree, c) for c in el.children],
    }
