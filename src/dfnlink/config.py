"""Document configuration consumed by the link pass.

Accepts the snake_case field names as well as the camelCase keys used by
document configs (``shortName``, ``normativeReferences``, ...).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dfnlink.io_utils import load_json


_ALIASES: dict[str, str] = {
    "shortName": "short_name",
    "normativeReferences": "normative_references",
    "informativeReferences": "informative_references",
}


@dataclass(frozen=True, slots=True)
class LinkConfig:
    """Per-document settings. The two reference sets are mutated in place."""

    short_name: str = ""
    xref: bool = False
    lang: str = "en"
    normative_references: set[str] = field(default_factory=set)
    informative_references: set[str] = field(default_factory=set)

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> LinkConfig:
        if not isinstance(payload, dict):
            raise ValueError("link config must be a JSON object")
        data = {_ALIASES.get(k, k): v for k, v in payload.items()}

        # xref may be a bool or a profile/object, any truthy value enables it.
        xref = data.get("xref", False)
        return cls(
            short_name=str(data.get("short_name") or ""),
            xref=bool(xref),
            lang=str(data.get("lang") or "en"),
            normative_references=_as_key_set(data.get("normative_references"), "normative_references"),
            informative_references=_as_key_set(
                data.get("informative_references"), "informative_references"
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "short_name": self.short_name,
            "xref": self.xref,
            "lang": self.lang,
            "normative_references": sorted(self.normative_references),
            "informative_references": sorted(self.informative_references),
        }


def _as_key_set(value: Any, name: str) -> set[str]:
    if value is None:
        return set()
    if isinstance(value, str) or not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueError(f"{name} must be a list of citation keys, got {type(value).__name__}")
    return {str(v) for v in value if str(v)}


def load_link_config(path: Path) -> LinkConfig:
    """Load a LinkConfig from a JSON file."""
    data = load_json(path)
    if not isinstance(data, dict):
        raise ValueError(f"Invalid link config payload in {path}")
    return LinkConfig.from_dict(data)
