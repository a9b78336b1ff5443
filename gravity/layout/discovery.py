"""Group discovery — collect flagged children under their parents."""

from __future__ import annotations

from dataclasses import dataclass

from gravity.tree.models import ElementTree

FLAG_CLASS = "gravity"


@dataclass(frozen=True)
class Group:
    """One parent container and its flagged children, in document order."""
    parent: int
    children: tuple[int, ...]


def discover_groups(
    tree: ElementTree, root: int, flag: str = FLAG_CLASS,
) -> list[Group]:
    """Build the groups below *root*.

    Every element carrying *flag* joins the group of its direct parent.
    Groups are ordered by their first flagged child in document order;
    a parent never appears twice.  The root itself is never a child.
    """
    by_parent: dict[int, list[int]] = {}
    for handle in tree.walk(root):
        if handle == root:
            continue
        el = tree.get(handle)
        if not el.has_class(flag) or el.parent is None:
            continue
        # dict preserves insertion order = first-seen order of parents
        by_parent.setdefault(el.parent, []).append(handle)

    return [Group(parent=p, children=tuple(kids)) for p, kids in by_parent.items()]
