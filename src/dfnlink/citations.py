"""Normative / informative reference-set bookkeeping for citation keys.

Runs after resolution, because resolving a reference to an externally
cited definition copies that definition's key onto the reference.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, MutableSet
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

SELF_CITATION_KEY = "__SPEC__"


@dataclass(frozen=True, slots=True)
class CiteDetails:
    """Parsed form of a citation key such as ``!DOM#concept-event``."""

    key: str
    is_normative: bool
    frag: str | None = None
    path: str | None = None


def to_cite_details(raw_key: str, *, informative: bool = False) -> CiteDetails:
    """Split a raw key into key, strength, fragment and path.

    ``!`` forces a normative citation and ``?`` an informative one; with no
    marker the element's own context decides.
    """
    if raw_key.startswith("!"):
        is_normative = True
        body = raw_key[1:]
    elif raw_key.startswith("?"):
        is_normative = False
        body = raw_key[1:]
    else:
        is_normative = not informative
        body = raw_key

    frag = None
    if "#" in body:
        body, frag = body.split("#", 1)
    path = None
    if "/" in body:
        body, path = body.split("/", 1)
        path = f"/{path}"
    return CiteDetails(key=body, is_normative=is_normative, frag=frag, path=path)


def self_citation_pattern(short_name: str) -> re.Pattern[str] | None:
    """Whole-word, case-insensitive pattern for the document's own short name."""
    if not short_name:
        return None
    return re.compile(rf"\b{re.escape(short_name.lower())}\b", re.IGNORECASE)


def rewrite_self_citation(raw_key: str, pattern: re.Pattern[str] | None) -> str:
    if pattern is None:
        return raw_key
    return pattern.sub(SELF_CITATION_KEY, raw_key, count=1)


def reconcile_references(
    records: Iterable[Any],
    *,
    short_name: str,
    normative: MutableSet[str],
    informative: MutableSet[str],
) -> int:
    """Move citation keys of *records* into the document's reference sets.

    *records* are definitions and references alike; only those with a
    non-empty ``citation_key`` take part, and their keys are rewritten in
    place when they cite the document itself. A key ends up normative if
    any element cites it normatively. Returns the number of keys seen.
    """
    pattern = self_citation_pattern(short_name)
    seen = 0
    for record in records:
        raw_key = record.citation_key
        if not raw_key:
            continue
        raw_key = rewrite_self_citation(raw_key, pattern)
        record.citation_key = raw_key

        details = to_cite_details(raw_key, informative=bool(record.informative))
        if details.key == SELF_CITATION_KEY:
            continue
        seen += 1

        if not details.is_normative and details.key not in normative:
            informative.add(details.key)
        else:
            normative.add(details.key)
            informative.discard(details.key)

    logger.debug(
        "reconciled %d citation keys: %d normative, %d informative",
        seen,
        len(normative),
        len(informative),
    )
    return seen
