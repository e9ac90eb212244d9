"""Document-scoped identifier allocation for definitions."""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable


_NON_WORD_RE = re.compile(r"\W+", re.ASCII)


def slugify_id(text: str, prefix: str = "") -> str:
    """Turn free text into an id fragment like ``dfn-event-target``."""
    slug = unicodedata.normalize("NFD", (text or "").strip().lower())
    slug = "".join(ch for ch in slug if not unicodedata.combining(ch))
    slug = _NON_WORD_RE.sub("-", slug).strip("-")
    if not slug:
        slug = "generatedID"
    elif not re.match(r"[a-z]", prefix or slug, re.IGNORECASE):
        slug = f"x{slug}"
    return f"{prefix}-{slug}" if prefix else slug


class IdAllocator:
    """Hands out ids that are unique within one document.

    Ids already present in the document are reserved up front; an element
    that already carries an id keeps it.
    """

    def __init__(self, taken: Iterable[str] = ()) -> None:
        self._taken: set[str] = {t for t in taken if t}

    def reserve(self, value: str) -> None:
        self._taken.add(value)

    def __contains__(self, value: object) -> bool:
        return value in self._taken

    def allocate(self, text: str, prefix: str = "") -> str:
        base = slugify_id(text, prefix)
        candidate = base
        counter = 0
        while candidate in self._taken:
            candidate = f"{base}-{counter}"
            counter += 1
        self._taken.add(candidate)
        return candidate

    def assign(self, record: object, text: str, prefix: str = "dfn") -> str:
        """Give *record* an id unless it already has one; return the id."""
        existing = getattr(record, "id", None)
        if existing:
            self._taken.add(existing)
            return existing
        new_id = self.allocate(text, prefix)
        setattr(record, "id", new_id)
        return new_id
