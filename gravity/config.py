"""Layout configuration — the force constants and gravitation points.

A single immutable ``Configuration`` is passed into every layout pass.
``DEFAULT_CONFIG`` holds the stock values; user options are overlaid on
top of it with ``parse_configuration`` so the defaults themselves are
never mutated.

    k        Force-scaling constant (golden-ratio derived).
    density  Inversely scales margin magnitude.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace


class ConfigurationError(ValueError):
    """Raised when layout options are malformed or out of range."""


Length = str | float


@dataclass(frozen=True)
class GravitationPoint:
    """A named attraction point, positioned relative to the layout root.

    ``top`` and ``left`` are lengths: ``"50%"`` (of the root box),
    ``"120px"`` or a bare number of pixels.
    """

    name: str
    top: Length = "50%"
    left: Length = "50%"

    def __post_init__(self) -> None:
        parse_length(self.top)
        parse_length(self.left)


def parse_length(value: Length) -> tuple[float, str]:
    """Split a length into (number, unit), unit being ``"%"`` or ``"px"``.

    Bare numbers and unit-less strings are pixels.
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid length {value!r}")
    if isinstance(value, (int, float)):
        number, unit = float(value), "px"
    else:
        text = str(value).strip()
        unit = "px"
        if text.endswith("%"):
            text, unit = text[:-1], "%"
        elif text.endswith("px"):
            text = text[:-2]
        try:
            number = float(text)
        except ValueError as e:
            raise ConfigurationError(f"Invalid length {value!r}") from e
    if not math.isfinite(number):
        raise ConfigurationError(f"Invalid length {value!r}")
    return number, unit


@dataclass(frozen=True)
class Configuration:
    """Options for one layout pass."""

    gravitation: tuple[GravitationPoint, ...] = field(
        default_factory=lambda: (GravitationPoint("g1", "50%", "50%"),),
    )

    k: float = 0.618
    """Force per pixel of child height."""

    density: float = 10.0
    """Divisor applied to authored margins before scaling by force."""

    def __post_init__(self) -> None:
        if not self.gravitation:
            raise ConfigurationError("At least one gravitation point is required")
        if not math.isfinite(self.k) or self.k < 0:
            raise ConfigurationError(f"k must be a finite non-negative number, got {self.k!r}")
        if not math.isfinite(self.density) or self.density <= 0:
            raise ConfigurationError(
                f"density must be a finite positive number, got {self.density!r}")

    @property
    def attractor(self) -> GravitationPoint:
        """The effective attractor: the first gravitation point."""
        return self.gravitation[0]


# Module-level singleton: the global defaults.
DEFAULT_CONFIG = Configuration()

_KNOWN_KEYS = {"gravitation", "k", "density"}


def parse_configuration(
    data: dict | None,
    base: Configuration = DEFAULT_CONFIG,
) -> Configuration:
    """Overlay raw options (from JSON / a request body) on *base*.

    Format:
        {"gravitation": [{"name": "g1", "top": "50%", "left": "50%"}],
         "k": 0.618, "density": 10}
    """
    if not data:
        return base

    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ConfigurationError(
            f"Unknown option(s): {', '.join(sorted(unknown))}. "
            f"Available: {', '.join(sorted(_KNOWN_KEYS))}"
        )

    overrides: dict = {}
    if "gravitation" in data:
        overrides["gravitation"] = tuple(
            _parse_point(i, p) for i, p in enumerate(data["gravitation"])
        )
    for key in ("k", "density"):
        if key in data:
            try:
                overrides[key] = float(data[key])
            except (TypeError, ValueError) as e:
                raise ConfigurationError(f"{key} must be a number, got {data[key]!r}") from e

    return replace(base, **overrides)


def _parse_point(index: int, raw: dict) -> GravitationPoint:
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Gravitation point {index}: expected an object")
    return GravitationPoint(
        name=str(raw.get("name", f"g{index + 1}")),
        top=raw.get("top", "50%"),
        left=raw.get("left", "50%"),
    )


def configuration_to_dict(config: Configuration) -> dict:
    """Convert a Configuration to a JSON-safe dict."""
    return {
        "gravitation": [
            {"name": p.name, "top": p.top, "left": p.left}
            for p in config.gravitation
        ],
        "k": config.k,
        "density": config.density,
    }
