"""Layout dataclasses and error types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .discovery import Group
    from .geometry import ResolvedNode


# ── Value types ────────────────────────────────────────────────────


@dataclass(frozen=True)
class Point:
    """Absolute page position (pixels)."""
    top: float
    left: float


@dataclass(frozen=True)
class Margins:
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0


@dataclass
class ChildMetrics:
    """Derived values for one child in a group."""

    handle: int
    width: float
    height: float
    force: float
    center: Point
    margin: Margins
    text_align: str | None = None       # None = leave the authored alignment
    clamped: bool = False               # top/bottom margins overridden to fit


@dataclass
class GroupMetrics:
    container_width: float
    container_height: float
    content_width: float
    content_height: float
    container_offset: Point
    attractor_offset: Point
    content_center: Point
    delta: Point
    padding_top: float


@dataclass
class GroupLayout:
    """The complete computed plan for one group, ready for write-back."""

    group: Group
    metrics: GroupMetrics
    children: list[ChildMetrics]


@dataclass
class LayoutResult:
    """Outcome of one layout pass over a root."""

    root: int
    attractor: ResolvedNode | None = None
    groups: list[GroupLayout] = field(default_factory=list)
    errors: list[GroupLayoutError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class LayoutStep(Enum):
    MEASURE_CONTAINER = "measure_container"
    MEASURE_ATTRACTOR = "measure_attractor"
    MEASURE_CHILDREN = "measure_children"
    PADDING = "padding"
    OVERFLOW_GUARD = "overflow_guard"
    ALIGNMENT = "alignment"


# ── Errors ─────────────────────────────────────────────────────────


class LayoutError(Exception):
    """Base class for layout failures."""


class ElementNotRenderedError(LayoutError):
    """Raised when an element's geometry cannot be read."""

    def __init__(self, handle: int, reason: str) -> None:
        self.handle = handle
        self.reason = reason
        super().__init__(f"Element #{handle} is not rendered: {reason}")


class InvalidGeometryError(LayoutError, ValueError):
    """Raised for negative, NaN or infinite sizes and force inputs."""

    def __init__(self, field_name: str, value: float) -> None:
        self.field = field_name
        self.value = value
        super().__init__(f"Invalid {field_name}: {value!r} (must be finite and >= 0)")


class GroupLayoutError(LayoutError):
    """A group could not be laid out.  Collected by ``layout``, not raised."""

    def __init__(self, parent: int, step: LayoutStep, reason: str) -> None:
        self.parent = parent
        self.step = step
        self.reason = reason
        super().__init__(f"Group #{parent} failed at {step.value}: {reason}")


class LayoutInProgressError(LayoutError):
    """Raised when a layout pass is started on a root that is already being laid out."""

    def __init__(self, root: int) -> None:
        self.root = root
        super().__init__(f"A layout pass is already running on root #{root}")
