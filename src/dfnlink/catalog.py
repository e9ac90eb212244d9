"""Definition catalog builder.

Folds raw definitions, grouped by title in document order, into a
read-only ``title -> scope -> kind -> RawDefinition`` catalog:

- titles and scopes are case-insensitive (see ``TitleIndex``)
- each (title, scope) holds at most one "dfn" and one "idl" entry
- a canonical ``<dfn>`` entry is never replaced; a second canonical
  definition with the same recorded kind is reported as a duplicate
- non-canonical entries are last-wins
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TypeAlias

from dfnlink.ids import IdAllocator
from dfnlink.link_types import (
    CatalogStateError,
    DefinitionKind,
    DuplicateDefinition,
    RawDefinition,
)
from dfnlink.title_index import TitleIndex, normalize_title

logger = logging.getLogger(__name__)

KindMap: TypeAlias = Mapping[DefinitionKind, RawDefinition]
ScopeMap: TypeAlias = Mapping[str, KindMap]


@dataclass(frozen=True, slots=True)
class DefinitionCatalog:
    """Read-only view over the folded definitions."""

    titles: TitleIndex[ScopeMap]

    @property
    def frozen(self) -> bool:
        return self.titles.frozen

    def __contains__(self, title: object) -> bool:
        return title in self.titles

    def __len__(self) -> int:
        return len(self.titles)

    def scopes(self, title: str) -> ScopeMap | None:
        return self.titles.get(title)

    def candidates(self, title: str, scope: str) -> KindMap | None:
        """Return the kind map for (title, scope), or None.

        Scopes match case-insensitively, like titles.
        """
        scopes = self.titles.get(title)
        if not scopes:
            return None
        return scopes.get(normalize_title(scope)) or None

    def require_frozen(self) -> None:
        if not self.frozen:
            raise CatalogStateError(
                "definition catalog is still being built; resolve only after build completes"
            )


def collect_definitions(
    title: str,
    definitions: Iterable[RawDefinition],
    ids: IdAllocator,
) -> tuple[dict[str, dict[DefinitionKind, RawDefinition]], list[DuplicateDefinition]]:
    """Fold one title's definitions, in document order, into scope/kind slots."""
    result: dict[str, dict[DefinitionKind, RawDefinition]] = {}
    duplicates: list[DuplicateDefinition] = []

    for dfn in definitions:
        kind = dfn.catalog_kind
        slot = result.setdefault(normalize_title(dfn.scope), {})
        existing = slot.get(kind)

        if existing is not None and existing.is_canonical:
            if not dfn.is_canonical or dfn.kind != existing.kind:
                # Canonical <dfn> definitions are never overwritten.
                continue
            duplicates.append(
                DuplicateDefinition(title=title, definition=dfn, original=existing)
            )
            ids.assign(dfn, title)
            continue

        slot[kind] = dfn
        ids.assign(dfn, title)

    return result, duplicates


def build_definition_catalog(
    definitions_by_title: Mapping[str, Iterable[RawDefinition]],
    *,
    ids: IdAllocator | None = None,
) -> tuple[DefinitionCatalog, list[DuplicateDefinition]]:
    """Build the frozen catalog plus a flat list of duplicate definitions."""
    allocator = ids if ids is not None else IdAllocator()
    titles: TitleIndex[ScopeMap] = TitleIndex()
    duplicates: list[DuplicateDefinition] = []

    merged: TitleIndex[list[RawDefinition]] = TitleIndex()
    for title, definitions in definitions_by_title.items():
        if title in merged:
            merged[title].extend(definitions)
        else:
            merged[title] = list(definitions)

    # Pre-existing ids must not be handed out to other definitions.
    for definitions in merged.values():
        for dfn in definitions:
            if dfn.id:
                allocator.reserve(dfn.id)

    for title, definitions in merged.items():
        folded, title_duplicates = collect_definitions(title, definitions, allocator)
        titles[title] = MappingProxyType(
            {scope: MappingProxyType(kinds) for scope, kinds in folded.items()}
        )
        duplicates.extend(title_duplicates)

    titles.freeze()
    logger.debug(
        "definition catalog built: %d titles, %d duplicates",
        len(titles),
        len(duplicates),
    )
    return DefinitionCatalog(titles=titles), duplicates
