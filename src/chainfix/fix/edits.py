"""Text edit application."""

from __future__ import annotations

from collections.abc import Iterable

from chainfix.core.models import TextEdit


def apply_edits(text: str, edits: Iterable[TextEdit]) -> str:
    """Apply ``edits`` to ``text`` and return the new text.

    Edits are applied right to left so earlier offsets stay valid. The caller
    must make sure edits for one text do not overlap.
    """
    ordered = sorted(edits, key=lambda e: e.start, reverse=True)
    if not ordered:
        return text

    out = text
    for edit in ordered:
        out = out[:edit.start] + edit.new_text + out[edit.end:]
    return out


def dedupe_edits(edits: Iterable[TextEdit]) -> list[TextEdit]:
    """Drop byte-identical edits, keeping first-seen order."""
    return list(dict.fromkeys(edits))
