"""Record types shared by the catalog builder, resolver and reconciler.

Definitions and references arrive from a document scanner as plain records.
Both are mutable: the catalog builder assigns definition ids, and the
resolver writes its outcome back onto each reference.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, TypeAlias


DefinitionKind: TypeAlias = Literal["dfn", "idl"]
LinkOutcome: TypeAlias = Literal[
    "resolved-internal",
    "resolved-external-citation",
    "resolved-external-classlabel",
    "unresolved-possibly-external",
    "unresolved-broken",
]

DFN: DefinitionKind = "dfn"
IDL: DefinitionKind = "idl"

# Outcomes handed to a later external-lookup pass.
DEFERRED_OUTCOMES: frozenset[str] = frozenset(
    {"resolved-external-classlabel", "unresolved-possibly-external"}
)


class CatalogStateError(RuntimeError):
    """Raised when resolution is attempted against an unfinished catalog."""


def normalize_kind(kind: str | None, *, has_idl_flag: bool = False) -> DefinitionKind:
    """Collapse a recorded kind into the two catalog kinds."""
    if has_idl_flag or (kind or "dfn") != "dfn":
        return IDL
    return DFN


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------

@dataclass(slots=True, eq=False)
class RawDefinition:
    """A defining occurrence of a term, as supplied by the scanner."""

    title: str
    scope: str = ""                 # "" = global; otherwise the "for" qualifier
    kind: str = "dfn"               # recorded kind: "dfn", "interface", "method", ...
    source_kind: str = "dfn"        # "dfn" marks a canonical defining element
    citation_key: str | None = None
    is_external: bool = False
    alternate_labels: tuple[str, ...] = ()
    local_labels: tuple[str, ...] = ()
    id: str | None = None
    has_idl_flag: bool = False
    text: str = ""
    title_attr: str | None = None
    in_code_ancestor: bool = False
    child_count: int = 1
    single_child_tag: str | None = None
    informative: bool = False
    node: Any = field(default=None, repr=False)

    @property
    def is_canonical(self) -> bool:
        return self.source_kind == "dfn"

    @property
    def catalog_kind(self) -> DefinitionKind:
        return normalize_kind(self.kind, has_idl_flag=self.has_idl_flag)


@dataclass(frozen=True, slots=True)
class DuplicateDefinition:
    """A canonical definition that repeats an earlier (title, scope, kind)."""

    title: str
    definition: RawDefinition
    original: RawDefinition


# ---------------------------------------------------------------------------
# References
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class LinkTarget:
    """One {title, scope} pair a reference may resolve against."""

    title: str
    scope: str = ""


@dataclass(slots=True, eq=False)
class Reference:
    """A mention of a term that should link to its definition."""

    text: str
    link_for: str | None = None      # scope qualifier carried by the reference
    link_type: str | None = None     # explicit kind request, None = unpinned
    citation_key: str | None = None  # None = none, "" = explicitly local
    is_idl_partial: bool = False
    has_code_child: bool = False
    informative: bool = False
    targets: tuple[LinkTarget, ...] = ()
    node: Any = field(default=None, repr=False)
    # Outcome, written by the resolver / link pass.
    outcome: LinkOutcome | None = None
    href: str | None = None
    effective_kind: DefinitionKind | None = None
    label: str | None = None
    wrap_as_code: bool = False

    @property
    def has_link_kind(self) -> bool:
        return self.link_type is not None

    @property
    def is_local_only(self) -> bool:
        return self.citation_key == ""
