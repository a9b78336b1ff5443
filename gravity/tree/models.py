"""Document model — an arena of elements addressed by integer handles.

Elements reference their parent and children by handle, never by
selector strings, so group/child references stay structural across
passes.  The rendered ``box`` of each element is supplied by the host
(browser bridge, JSON document, tests); the layout engine only reads it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator

if TYPE_CHECKING:
    from gravity.layout.styles import StyleJournal


class TreeError(ValueError):
    """Raised for malformed documents or unknown handles."""


STYLE_PROPERTIES = (
    "margin_top", "margin_right", "margin_bottom", "margin_left",
    "padding_top", "text_align",
)


@dataclass
class Box:
    """Outer (border-box) geometry in absolute page pixels."""
    top: float
    left: float
    width: float
    height: float


@dataclass
class Style:
    """The style properties the layout pass reads and writes.

    Margins and padding are pixels.  ``text_align`` uses CSS keywords;
    ``"start"`` is the unset/inherited value.
    """
    margin_top: float = 0.0
    margin_right: float = 0.0
    margin_bottom: float = 0.0
    margin_left: float = 0.0
    padding_top: float = 0.0
    text_align: str = "start"


@dataclass
class Element:
    handle: int
    name: str = ""
    box: Box | None = None
    style: Style = field(default_factory=Style)
    classes: list[str] = field(default_factory=list)
    rendered: bool = True               # False = display:none / hidden
    parent: int | None = None
    children: list[int] = field(default_factory=list)

    def has_class(self, cls: str) -> bool:
        return cls in self.classes


class ElementTree:
    """Arena of elements.  Handles are list indexes and never reused."""

    def __init__(self) -> None:
        self._elements: list[Element] = []
        self._detached: set[int] = set()
        # root handle -> journal of style writes made by layout passes
        self.journals: dict[int, StyleJournal] = {}
        # roots with a layout pass currently running
        self.busy: set[int] = set()

    def __len__(self) -> int:
        return len(self._elements)

    def create(
        self,
        name: str = "",
        box: Box | None = None,
        *,
        parent: int | None = None,
        style: Style | None = None,
        classes: list[str] | tuple[str, ...] = (),
        rendered: bool = True,
    ) -> int:
        """Append a new element (as the last child of *parent*) and return its handle."""
        if parent is not None:
            self.get(parent)
        handle = len(self._elements)
        self._elements.append(Element(
            handle=handle,
            name=name,
            box=box,
            style=style or Style(),
            classes=list(classes),
            rendered=rendered,
            parent=parent,
        ))
        if parent is not None:
            self._elements[parent].children.append(handle)
        return handle

    def get(self, handle: int) -> Element:
        if not 0 <= handle < len(self._elements):
            raise TreeError(f"Unknown element handle {handle}")
        return self._elements[handle]

    def contains(self, handle: int) -> bool:
        return 0 <= handle < len(self._elements)

    def children(self, handle: int) -> list[int]:
        return list(self.get(handle).children)

    def parent(self, handle: int) -> int | None:
        return self.get(handle).parent

    def ancestors(self, handle: int) -> Iterator[int]:
        """Yield the parent chain of *handle*, nearest first."""
        current = self.get(handle).parent
        while current is not None:
            yield current
            current = self._elements[current].parent

    def walk(self, root: int) -> Iterator[int]:
        """Pre-order (document order) traversal of the subtree at *root*."""
        stack = [root]
        while stack:
            handle = stack.pop()
            yield handle
            stack.extend(reversed(self.get(handle).children))

    def find(self, root: int, cls: str) -> list[int]:
        """All elements below *root* (inclusive) carrying class *cls*, in document order."""
        return [h for h in self.walk(root) if self._elements[h].has_class(cls)]

    def by_name(self, name: str) -> int:
        for el in self._elements:
            if el.name == name:
                return el.handle
        raise TreeError(f"No element named '{name}'")

    def detach(self, handle: int) -> None:
        """Remove the subtree at *handle* from its parent.

        The elements stay in the arena (handles remain valid) but are no
        longer rendered.
        """
        el = self.get(handle)
        if el.parent is not None:
            self._elements[el.parent].children.remove(handle)
            el.parent = None
        self._detached.add(handle)

    def is_attached(self, handle: int) -> bool:
        """True if neither *handle* nor any ancestor has been detached."""
        if handle in self._detached:
            return False
        return not any(a in self._detached for a in self.ancestors(handle))
