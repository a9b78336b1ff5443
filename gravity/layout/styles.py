"""Style applier — write computed styles back onto elements.

Every write made on behalf of a layout root goes through that root's
``StyleJournal``, which remembers the authored value of each property and
the value the pass last wrote over it.  A journaled original only stands
while the element still carries the written value: once the host changes
the property, the host's value becomes the new authored one.

Journals of different roots see each other's writes, so a pass on a
nested root reads the true authored value rather than a value an outer
pass computed, and ``teardown`` of either root puts that value back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from gravity.tree.models import ElementTree, TreeError, STYLE_PROPERTIES

log = logging.getLogger(__name__)


@dataclass
class StyleJournal:
    """Authored and last-written values of every (handle, property) a pass wrote."""

    originals: dict[tuple[int, str], float | str] = field(default_factory=dict)
    written: dict[tuple[int, str], float | str] = field(default_factory=dict)

    def record(self, handle: int, prop: str, authored: float | str,
               value: float | str) -> None:
        self.originals[(handle, prop)] = authored
        self.written[(handle, prop)] = value

    def holds(self, handle: int, prop: str, current: float | str) -> bool:
        """True if *current* is still the value this journal last wrote."""
        key = (handle, prop)
        return key in self.written and self.written[key] == current

    def authored(self, handle: int, prop: str, current: float | str) -> float | str:
        """The authored value of a property, or *current* if the host owns it."""
        if self.holds(handle, prop, current):
            return self.originals[(handle, prop)]
        return current

    def __len__(self) -> int:
        return len(self.originals)


def authored_value(
    tree: ElementTree,
    handle: int,
    prop: str,
    current: float | str,
    journal: StyleJournal | None = None,
) -> float | str:
    """Resolve the authored value of a property across every layout root.

    *journal* is consulted first, then the journals of the other roots
    laid out on *tree*.
    """
    journals = [journal] if journal is not None else []
    journals += [j for j in tree.journals.values() if j is not journal]
    for j in journals:
        if j.holds(handle, prop, current):
            return j.originals[(handle, prop)]
    return current


def apply_style(
    tree: ElementTree,
    handle: int,
    *,
    journal: StyleJournal | None = None,
    **props: float | str,
) -> None:
    """Set style properties on an element.

    Each property is optional and independent; writing the same property
    twice in one pass keeps the last value.  Unknown properties are
    rejected before anything is written.
    """
    unknown = [prop for prop in props if prop not in STYLE_PROPERTIES]
    if unknown:
        raise TreeError(f"Unknown style properties {sorted(unknown)}")
    el = tree.get(handle)
    for prop, value in props.items():
        value = str(value) if prop == "text_align" else float(value)
        if journal is not None:
            current = getattr(el.style, prop)
            journal.record(handle, prop,
                           authored_value(tree, handle, prop, current, journal), value)
        setattr(el.style, prop, value)


def restore_styles(tree: ElementTree, journal: StyleJournal) -> int:
    """Write journaled originals back where the pass's value still stands.

    Properties the host changed since the last pass keep the host's
    value.  Returns the number restored.
    """
    restored = 0
    for (handle, prop), value in journal.originals.items():
        if journal.holds(handle, prop, getattr(tree.get(handle).style, prop)):
            apply_style(tree, handle, **{prop: value})
            restored += 1
    journal.originals.clear()
    journal.written.clear()
    log.debug("Restored %d style properties", restored)
    return restored
