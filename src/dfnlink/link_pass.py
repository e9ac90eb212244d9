"""One complete definition-linking pass over a document's records.

Order matters: the catalog is built (and frozen) before any reference is
resolved, and citation sets are reconciled only after every reference has
been resolved, since resolution can copy citation keys onto references.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from dfnlink.catalog import DefinitionCatalog, build_definition_catalog
from dfnlink.citations import reconcile_references
from dfnlink.config import LinkConfig
from dfnlink.diagnostics import DiagnosticsReporter, message
from dfnlink.ids import IdAllocator
from dfnlink.link_types import (
    DEFERRED_OUTCOMES,
    DuplicateDefinition,
    RawDefinition,
    Reference,
)
from dfnlink.resolver import resolve_first

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class LinkPassReport:
    """Result of ``run_link_pass``."""

    catalog: DefinitionCatalog
    duplicates: list[DuplicateDefinition] = field(default_factory=list)
    resolved: list[Reference] = field(default_factory=list)
    broken: list[Reference] = field(default_factory=list)
    deferred: list[Reference] = field(default_factory=list)
    skipped: list[Reference] = field(default_factory=list)

    def summary(self) -> dict[str, Any]:
        outcomes: dict[str, int] = {}
        for ref in (*self.resolved, *self.broken, *self.deferred):
            if ref.outcome:
                outcomes[ref.outcome] = outcomes.get(ref.outcome, 0) + 1
        return {
            "titles": len(self.catalog),
            "duplicates": len(self.duplicates),
            "resolved": len(self.resolved),
            "broken": len(self.broken),
            "deferred": len(self.deferred),
            "skipped": len(self.skipped),
            "outcomes": dict(sorted(outcomes.items())),
        }


def report_duplicates(
    duplicates: list[DuplicateDefinition],
    reporter: DiagnosticsReporter,
    *,
    lang: str = "en",
) -> None:
    """Report duplicates once per title, in first-seen title order."""
    by_title: dict[str, list[RawDefinition]] = {}
    for dup in duplicates:
        by_title.setdefault(dup.title, []).append(dup.definition)
    for title, definitions in by_title.items():
        reporter.report(
            definitions,
            message("duplicate_msg", lang, title=title),
            message("duplicate_title", lang),
            level="error",
        )


def report_linking_errors(
    references: Iterable[Reference],
    reporter: DiagnosticsReporter,
    *,
    lang: str = "en",
) -> None:
    for ref in references:
        reporter.report(
            [ref],
            message("linking_msg", lang, text=ref.text),
            message("linking_title", lang),
        )


def run_link_pass(
    definitions_by_title: Mapping[str, Iterable[RawDefinition]],
    references: Iterable[Reference],
    config: LinkConfig,
    reporter: DiagnosticsReporter,
    *,
    ids: IdAllocator | None = None,
) -> LinkPassReport:
    """Build the catalog, resolve local references and reconcile citations.

    Only references without a citation key, or with an explicitly empty one,
    are resolved here. When ``config.xref`` is off, nothing will look the
    deferred references up later, so they are reported right away.
    """
    definitions_by_title = {t: list(d) for t, d in definitions_by_title.items()}
    catalog, duplicates = build_definition_catalog(definitions_by_title, ids=ids)
    report = LinkPassReport(catalog=catalog, duplicates=duplicates)
    report_duplicates(duplicates, reporter, lang=config.lang)

    references = list(references)
    for ref in references:
        if ref.citation_key:
            continue
        if resolve_first(ref, ref.targets, catalog) is not None:
            if ref.outcome in DEFERRED_OUTCOMES:
                report.deferred.append(ref)
            else:
                report.resolved.append(ref)
            continue
        if not ref.targets:
            report.skipped.append(ref)
        elif ref.is_local_only:
            ref.outcome = "unresolved-broken"
            report.broken.append(ref)
        else:
            ref.outcome = "unresolved-possibly-external"
            report.deferred.append(ref)

    report_linking_errors(report.broken, reporter, lang=config.lang)

    # A definition listed under several titles is reconciled once.
    unique_definitions = {id(d): d for defs in definitions_by_title.values() for d in defs}
    cited: list[Any] = [*unique_definitions.values(), *references]
    reconcile_references(
        cited,
        short_name=config.short_name,
        normative=config.normative_references,
        informative=config.informative_references,
    )

    if not config.xref:
        report_linking_errors(report.deferred, reporter, lang=config.lang)
        still_deferred: list[Reference] = []
        for ref in report.deferred:
            if ref.outcome == "unresolved-possibly-external":
                ref.outcome = "unresolved-broken"
                report.broken.append(ref)
            else:
                still_deferred.append(ref)
        report.deferred = still_deferred

    logger.info(
        "link pass: %d resolved, %d broken, %d deferred, %d skipped",
        len(report.resolved),
        len(report.broken),
        len(report.deferred),
        len(report.skipped),
    )
    return report
