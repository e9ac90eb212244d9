"""Case-insensitive title index.

Titles are compared after whitespace collapse and case folding, so
"Foo", "foo" and " FOO " all address the same entry. The first spelling
seen is kept as the display title.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TypeVar


V = TypeVar("V")


def normalize_title(title: str) -> str:
    return " ".join((title or "").split()).casefold()


class TitleIndex(Mapping[str, V]):
    """Mapping keyed by normalized title, preserving insertion order."""

    __slots__ = ("_entries", "_frozen")

    def __init__(self, items: Mapping[str, V] | None = None) -> None:
        self._entries: dict[str, tuple[str, V]] = {}
        self._frozen = False
        if items:
            for title, value in items.items():
                self[title] = value

    def __getitem__(self, title: str) -> V:
        return self._entries[normalize_title(title)][1]

    def __setitem__(self, title: str, value: V) -> None:
        if self._frozen:
            raise TypeError("TitleIndex is frozen")
        key = normalize_title(title)
        display = self._entries[key][0] if key in self._entries else title
        self._entries[key] = (display, value)

    def __contains__(self, title: object) -> bool:
        if not isinstance(title, str):
            return False
        return normalize_title(title) in self._entries

    def __iter__(self) -> Iterator[str]:
        return (display for display, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"TitleIndex({dict(self.items())!r})"

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen
