"""Layout — pulls groups of sibling elements toward a gravitation point.

Submodules:
  models        Result dataclasses and error types.
  geometry      Geometry reader and gravitation point resolution.
  forces        Force model (force and force-scaled margins).
  discovery     Parent/children grouping of flagged elements.
  styles        Style applier and the journal of authored values used by
                repeated passes and teardown.
  engine        Per-group computation and the layout pass.
  serialization JSON conversion (layout_result_to_dict).
"""

from .models import (
    Point, Margins, ChildMetrics, GroupMetrics, GroupLayout, LayoutResult, LayoutStep,
    LayoutError, ElementNotRenderedError, InvalidGeometryError, GroupLayoutError,
    LayoutInProgressError,
)
from .geometry import Geometry, ResolvedNode, measure, resolve_gravitation, resolve_length
from .forces import force, margin, side_margins
from .discovery import Group, discover_groups, FLAG_CLASS
from .styles import StyleJournal, apply_style, authored_value
from .engine import layout, layout_group, teardown, vertical_padding, text_alignment
from .serialization import layout_result_to_dict

__all__ = [
    # Models
    "Point", "Margins", "ChildMetrics", "GroupMetrics", "GroupLayout",
    "LayoutResult", "LayoutStep",
    # Errors
    "LayoutError", "ElementNotRenderedError", "InvalidGeometryError",
    "GroupLayoutError", "LayoutInProgressError",
    # Geometry / forces / discovery / styles
    "Geometry", "ResolvedNode", "measure", "resolve_gravitation", "resolve_length",
    "force", "margin", "side_margins",
    "Group", "discover_groups", "FLAG_CLASS",
    "StyleJournal", "apply_style", "authored_value",
    # Engine
    "layout", "layout_group", "teardown", "vertical_padding", "text_alignment",
    # Serialization
    "layout_result_to_dict",
]
