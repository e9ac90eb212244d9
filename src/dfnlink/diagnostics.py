"""Diagnostics collection for duplicate definitions and broken links.

The link pass decides *when* to report and *which* records are involved;
presentation is left to whoever consumes the collected entries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Protocol, TypeAlias


DiagnosticLevel: TypeAlias = Literal["error", "warning"]


_MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "duplicate_msg": "Duplicate definition(s) of '{title}'",
        "duplicate_title": "This is defined more than once in the document.",
        "linking_msg": 'Found linkless `<a>` element with text "{text}" but no matching `<dfn>`',
        "linking_title": "Linking error: not matching `<dfn>`",
    },
    "ja": {
        "duplicate_msg": "'{title}' の重複定義",
        "duplicate_title": "この文書内で複数回定義されています．",
    },
    "de": {
        "duplicate_msg": "Mehrfache Definition von '{title}'",
        "duplicate_title": "Das Dokument enthält mehrere Definitionen dieses Eintrags.",
    },
}


def message(key: str, lang: str = "en", **params: str) -> str:
    """Look up a message, falling back to English for unknown lang/keys."""
    table = _MESSAGES.get((lang or "en").split("-")[0].lower(), {})
    template = table.get(key) or _MESSAGES["en"][key]
    return template.format(**params)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    level: DiagnosticLevel
    elements: tuple[Any, ...]
    message: str
    summary: str


class DiagnosticsReporter(Protocol):
    def report(
        self,
        elements: list[Any],
        message: str,
        summary: str,
        *,
        level: DiagnosticLevel = "warning",
    ) -> None: ...


@dataclass(slots=True)
class DiagnosticsCollector:
    """Append-only reporter; entry order carries no meaning."""

    entries: list[Diagnostic] = field(default_factory=list)

    def report(
        self,
        elements: list[Any],
        message: str,
        summary: str,
        *,
        level: DiagnosticLevel = "warning",
    ) -> None:
        self.entries.append(
            Diagnostic(level=level, elements=tuple(elements), message=message, summary=summary)
        )

    def __len__(self) -> int:
        return len(self.entries)

    def by_level(self, level: DiagnosticLevel) -> list[Diagnostic]:
        return [d for d in self.entries if d.level == level]

    def to_records(self) -> list[dict[str, Any]]:
        """JSON-friendly view; elements are summarized by id/text."""
        rows: list[dict[str, Any]] = []
        for diag in self.entries:
            rows.append(
                {
                    "level": diag.level,
                    "message": diag.message,
                    "summary": diag.summary,
                    "elements": [_describe(el) for el in diag.elements],
                }
            )
        return rows


def _describe(element: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for attr in ("id", "title", "scope", "text", "outcome"):
        value = getattr(element, attr, None)
        if value not in (None, ""):
            out[attr] = value
    return out
