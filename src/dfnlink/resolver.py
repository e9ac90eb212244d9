"""Reference resolution against a built definition catalog.

For one reference and one candidate {title, scope}:

1. look up the (title, scope) kind map; no entry means "not found"
2. choose a definition by kind (see ``select_definition``)
3. classify: external citation, possibly-external, external class label,
   partial IDL (never linked locally) or internal link
4. pin the reference kind if it was not pinned already
5. compute the code styling hint

The resolver only writes to the reference; the catalog is never touched.
"""

from __future__ import annotations

from collections.abc import Mapping

from dfnlink.catalog import DefinitionCatalog
from dfnlink.code_style import should_wrap_as_code
from dfnlink.link_types import (
    DFN,
    IDL,
    DefinitionKind,
    LinkOutcome,
    LinkTarget,
    RawDefinition,
    Reference,
)


def select_definition(
    kinds: Mapping[DefinitionKind, RawDefinition],
    *,
    scope: str,
    link_type: str | None,
) -> RawDefinition | None:
    """Pick the definition a reference means among same-titled kinds.

    Without an explicit kind, a scoped reference is more often an interface
    member, so "idl" is preferred when a scope is given and "dfn" otherwise;
    "idl" is the fallback. An explicit "dfn" asks for the prose entry and any
    other explicit kind for the "idl" entry; when the requested entry is
    missing, whichever kind is present is used.
    """
    if not link_type:
        preferred: DefinitionKind = DFN if scope == "" else IDL
        return kinds.get(preferred) or kinds.get(IDL) or kinds.get(DFN)
    requested: DefinitionKind = DFN if link_type == DFN else IDL
    other: DefinitionKind = IDL if requested == DFN else DFN
    return kinds.get(requested) or kinds.get(other)


def effective_kind(dfn: RawDefinition) -> DefinitionKind:
    return IDL if dfn.has_idl_flag else DFN


def external_label(dfn: RawDefinition) -> str:
    """Label that identifies an externally defined term."""
    if dfn.alternate_labels and dfn.alternate_labels[0]:
        return dfn.alternate_labels[0]
    return dfn.text


def classify(
    reference: Reference,
    dfn: RawDefinition,
    catalog: DefinitionCatalog,
) -> LinkOutcome:
    """Decide the outcome for *reference* resolved to *dfn* and record it."""
    if dfn.citation_key:
        reference.citation_key = dfn.citation_key
        return "resolved-external-citation"
    if reference.link_for and reference.link_for not in catalog:
        return "unresolved-possibly-external"
    if dfn.is_external:
        reference.label = external_label(dfn)
        return "resolved-external-classlabel"
    if reference.is_idl_partial:
        return "unresolved-possibly-external"
    reference.href = f"#{dfn.id}"
    return "resolved-internal"


def resolve_reference(
    reference: Reference,
    target: LinkTarget,
    catalog: DefinitionCatalog,
) -> bool:
    """Resolve *reference* against one candidate target.

    Returns False when the catalog has nothing for (title, scope); the
    reference is left untouched in that case. Otherwise the outcome, kind
    and styling hint are written to the reference and True is returned.
    """
    catalog.require_frozen()
    kinds = catalog.candidates(target.title, target.scope)
    if not kinds:
        return False

    dfn = select_definition(kinds, scope=target.scope, link_type=reference.link_type)
    if dfn is None:
        return False

    reference.outcome = classify(reference, dfn, catalog)
    kind = effective_kind(dfn)
    if not reference.has_link_kind:
        reference.link_type = kind
    reference.effective_kind = kind
    reference.wrap_as_code = should_wrap_as_code(reference, dfn)
    return True


def resolve_first(
    reference: Reference,
    targets: tuple[LinkTarget, ...] | list[LinkTarget],
    catalog: DefinitionCatalog,
) -> LinkTarget | None:
    """Try *targets* in order; return the one that resolved, if any."""
    for target in targets:
        if resolve_reference(reference, target, catalog):
            return target
    return None
