"""Force model — scalar force from element height, and force-scaled margins.

Taller elements get proportionally larger spacing; ``density`` scales
it back down so the defaults stay visually reasonable.
"""

from __future__ import annotations

import math

from .models import InvalidGeometryError, Margins


def _check(name: str, value: float) -> float:
    if not math.isfinite(value) or value < 0:
        raise InvalidGeometryError(name, value)
    return value


def force(height: float, k: float) -> float:
    """Force of a child: ``height * k``."""
    return _check("height", height) * _check("k", k)


def margin(authored: float, density: float, force_value: float) -> float:
    """Force-scaled margin for one side: ``(authored / density) * force``.

    *authored* is the element's own pixel margin on that side and acts
    as the base multiplier.
    """
    _check("margin", authored)
    _check("force", force_value)
    if not math.isfinite(density) or density <= 0:
        raise InvalidGeometryError("density", density)
    return authored / density * force_value


def side_margins(authored: Margins, density: float, force_value: float) -> Margins:
    """Apply ``margin`` to each side independently."""
    return Margins(
        top=margin(authored.top, density, force_value),
        right=margin(authored.right, density, force_value),
        bottom=margin(authored.bottom, density, force_value),
        left=margin(authored.left, density, force_value),
    )
