"""Decide whether a resolved reference should be shown as code."""

from __future__ import annotations

from dfnlink.link_types import RawDefinition, Reference


CODE_TAGS: frozenset[str] = frozenset({"code"})


def is_code_like(dfn: RawDefinition) -> bool:
    """True for IDL definitions, definitions inside code, or a lone <code> child.

    A definition with more than one child node (extra text, whitespace or
    markup around the term) is not treated as a code token.
    """
    if dfn.has_idl_flag or dfn.in_code_ancestor:
        return True
    if dfn.child_count != 1:
        return False
    return (dfn.single_child_tag or "").lower() in CODE_TAGS


def matches_term(dfn: RawDefinition, term: str) -> bool:
    """Does *term* name this definition by text, title or one of its labels?"""
    if dfn.text.strip() == term:
        return True
    if dfn.title_attr == term:
        return True
    if dfn.alternate_labels or dfn.local_labels:
        return term in (*dfn.alternate_labels, *dfn.local_labels)
    return False


def should_wrap_as_code(reference: Reference, dfn: RawDefinition) -> bool:
    """Styling hint for *reference* once it has resolved to *dfn*.

    IDL definitions are usually styled by the markup that produced them, so
    their references are only wrapped when the reference already contains
    code or its text names the definition.
    """
    if not is_code_like(dfn):
        return False
    if not dfn.has_idl_flag:
        return True
    term = reference.text.strip()
    return reference.has_code_child or matches_term(dfn, term)
