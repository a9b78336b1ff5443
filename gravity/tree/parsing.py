"""Document parsing — convert raw dicts/JSON into an ElementTree."""

from __future__ import annotations

from .models import Box, ElementTree, Style, TreeError, STYLE_PROPERTIES


def parse_tree(data: dict) -> tuple[ElementTree, int]:
    """Parse a nested element dict into a tree.  Returns (tree, root_handle).

    Format:
        {"name": "body",
         "box": {"top": 0, "left": 0, "width": 800, "height": 600},
         "style": {"margin_top": 20, "text_align": "start"},
         "classes": ["gravity"],
         "rendered": true,
         "children": [...]}
    """
    tree = ElementTree()
    root = _parse_element(tree, data, parent=None, path="root")
    return tree, root


def _parse_element(tree: ElementTree, data: dict, parent: int | None, path: str) -> int:
    if not isinstance(data, dict):
        raise TreeError(f"{path}: expected an object, got {type(data).__name__}")

    handle = tree.create(
        name=str(data.get("name", "")),
        box=_parse_box(data.get("box"), path),
        parent=parent,
        style=_parse_style(data.get("style") or {}, path),
        classes=_parse_classes(data.get("classes", []), path),
        rendered=bool(data.get("rendered", True)),
    )
    for i, child in enumerate(data.get("children", [])):
        _parse_element(tree, child, parent=handle, path=f"{path}.children[{i}]")
    return handle


def _parse_classes(raw, path: str) -> list[str]:
    if not isinstance(raw, (list, tuple)) or not all(isinstance(c, str) for c in raw):
        raise TreeError(f"{path}: classes must be a list of strings, got {raw!r}")
    return list(raw)


def _parse_box(raw: dict | None, path: str) -> Box | None:
    if raw is None:
        return None
    try:
        return Box(
            top=float(raw.get("top", 0)),
            left=float(raw.get("left", 0)),
            width=float(raw["width"]),
            height=float(raw["height"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise TreeError(f"{path}: invalid box {raw!r}") from e


def _parse_style(raw: dict, path: str) -> Style:
    unknown = set(raw) - set(STYLE_PROPERTIES)
    if unknown:
        raise TreeError(f"{path}: unknown style properties {sorted(unknown)}")
    style = Style()
    for prop, value in raw.items():
        if prop == "text_align":
            style.text_align = str(value)
        else:
            setattr(style, prop, parse_px(value, f"{path}.style.{prop}"))
    return style


def parse_px(value: str | float | int, where: str = "value") -> float:
    """Parse a pixel length: ``12``, ``12.5`` or ``"12px"``."""
    if isinstance(value, bool):
        raise TreeError(f"{where}: expected a pixel length, got {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if text.endswith("px"):
        text = text[:-2].strip()
    try:
        return float(text)
    except ValueError as e:
        raise TreeError(f"{where}: expected a pixel length, got {value!r}") from e
