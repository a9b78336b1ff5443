"""Document model — element arena, parsing, validation, and serialization."""

from .models import Box, Style, Element, ElementTree, TreeError, STYLE_PROPERTIES
from .parsing import parse_tree, parse_px
from .validation import validate_tree
from .serialization import tree_to_dict

__all__ = [
    # Models
    "Box", "Style", "Element", "ElementTree", "TreeError", "STYLE_PROPERTIES",
    # Parsing / Validation / Serialization
    "parse_tree", "parse_px", "validate_tree", "tree_to_dict",
]
