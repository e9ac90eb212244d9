"""HTML adapter: scan definitions/references out of markup and write outcomes back.

Definitions are ``<dfn>`` elements and anything carrying ``data-dfn-type``.
Local references are ``<a data-cite="">`` and anchors with neither ``href``
nor ``data-cite`` (logos and ``.externalDFN`` anchors excluded). Anchors with a
non-empty ``data-cite`` are collected as well, for citation bookkeeping only.

Attributes read:
    data-lt / data-local-lt   ``|``-separated alternate labels
    data-dfn-for / data-dfn-type / data-idl / data-cite / data-title
    data-link-for / data-link-type (on references, or inherited for scope)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from bs4 import BeautifulSoup
from bs4.element import Tag

from dfnlink.ids import IdAllocator
from dfnlink.link_targets import expand_link_targets, reference_titles, split_labels
from dfnlink.link_types import RawDefinition, Reference


DEFINITION_SELECTOR = "dfn, [data-dfn-type]"
LOCAL_LINK_SELECTOR = (
    "a[data-cite=''], a:not([href]):not([data-cite]):not(.logo):not(.externalDFN)"
)
CITED_LINK_SELECTOR = "a[data-cite]:not([data-cite=''])"
_INFORMATIVE_CLASSES = frozenset(
    {"informative", "note", "issue", "example", "ednote", "practice", "introductory"}
)


@dataclass(slots=True)
class HtmlDocument:
    """Parsed document plus the records scanned from it."""

    soup: BeautifulSoup
    definitions_by_title: dict[str, list[RawDefinition]] = field(default_factory=dict)
    references: list[Reference] = field(default_factory=list)
    ids: IdAllocator = field(default_factory=IdAllocator)

    @property
    def definitions(self) -> list[RawDefinition]:
        """Unique definitions in document order."""
        seen: dict[int, RawDefinition] = {}
        for defs in self.definitions_by_title.values():
            for dfn in defs:
                seen.setdefault(id(dfn), dfn)
        return list(seen.values())

    def render(self) -> str:
        return str(self.soup)


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def read_html(fpath: Path) -> str:
    """Read an HTML file: UTF-8, then CP1252, then UTF-8 with replacement."""
    try:
        return fpath.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        try:
            return fpath.read_text(encoding="cp1252")
        except UnicodeDecodeError:
            return fpath.read_bytes().decode("utf-8", errors="replace")


def _attr(tag: Tag, name: str) -> str | None:
    value = tag.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _in_informative_context(tag: Tag) -> bool:
    node: Tag | None = tag
    while node is not None and isinstance(node, Tag):
        classes = node.get("class") or []
        if _INFORMATIVE_CLASSES.intersection(classes):
            return True
        node = node.parent
    return False


def _closest_with_attr(tag: Tag, name: str) -> Tag | None:
    if tag.has_attr(name):
        return tag
    return tag.find_parent(attrs={name: True})


def _definition_from_tag(tag: Tag, title: str) -> RawDefinition:
    children = list(tag.children)
    single_child_tag = None
    if len(children) == 1 and isinstance(children[0], Tag):
        single_child_tag = children[0].name
    return RawDefinition(
        title=title,
        scope=(_attr(tag, "data-dfn-for") or "").strip(),
        kind=_attr(tag, "data-dfn-type") or "dfn",
        source_kind=tag.name,
        citation_key=_attr(tag, "data-cite"),
        is_external="externalDFN" in (tag.get("class") or []),
        alternate_labels=split_labels(_attr(tag, "data-lt")),
        local_labels=split_labels(_attr(tag, "data-local-lt")),
        id=_attr(tag, "id") or None,
        has_idl_flag=tag.has_attr("data-idl"),
        text=tag.get_text(),
        title_attr=_attr(tag, "data-title"),
        in_code_ancestor=tag.find_parent(["code", "pre"]) is not None,
        child_count=len(children),
        single_child_tag=single_child_tag,
        informative=_in_informative_context(tag),
        node=tag,
    )


def _reference_from_tag(tag: Tag) -> Reference:
    text = tag.get_text()
    scope_tag = _closest_with_attr(tag, "data-link-for")
    link_for = (_attr(scope_tag, "data-link-for") or "") if scope_tag is not None else ""
    abbr = tag.find("abbr") if len(list(tag.children)) == 1 else None
    titles = reference_titles(
        text,
        labels=split_labels(_attr(tag, "data-lt")),
        abbr_title=_attr(abbr, "title") if abbr is not None else None,
        no_default=tag.has_attr("data-lt-nodefault"),
    )
    return Reference(
        text=text,
        link_for=_attr(tag, "data-link-for"),
        link_type=_attr(tag, "data-link-type"),
        citation_key=_attr(tag, "data-cite"),
        is_idl_partial=_attr(tag, "data-idl") == "partial",
        has_code_child=tag.find("code") is not None,
        informative=_in_informative_context(tag),
        targets=expand_link_targets(
            titles, link_for=link_for, has_scope_ancestor=scope_tag is not None
        ),
        node=tag,
    )


def scan_html(raw_html: str) -> HtmlDocument:
    """Parse *raw_html* and collect definition and reference records."""
    soup = BeautifulSoup(raw_html, "html.parser")
    doc = HtmlDocument(soup=soup)
    for tag in soup.find_all(id=True):
        doc.ids.reserve(str(tag["id"]))

    for tag in soup.select(DEFINITION_SELECTOR):
        titles = reference_titles(
            tag.get_text(),
            labels=split_labels(_attr(tag, "data-lt")),
            no_default=tag.has_attr("data-lt-nodefault"),
        )
        if not titles:
            continue
        dfn = _definition_from_tag(tag, titles[0])
        for title in titles:
            doc.definitions_by_title.setdefault(title, []).append(dfn)

    # Cited anchors are kept too: they take part in citation reconciliation.
    selector = f"{LOCAL_LINK_SELECTOR}, {CITED_LINK_SELECTOR}"
    doc.references = [_reference_from_tag(tag) for tag in soup.select(selector)]
    return doc


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def _wrap_inner(soup: BeautifulSoup, tag: Tag, wrapper_name: str) -> None:
    wrapper = soup.new_tag(wrapper_name)
    for child in list(tag.contents):
        wrapper.append(child.extract())
    tag.append(wrapper)


def _add_class(tag: Tag, name: str) -> None:
    classes = list(tag.get("class") or [])
    if name not in classes:
        classes.append(name)
    tag["class"] = classes


def apply_outcomes(doc: HtmlDocument) -> None:
    """Write ids, links, citation keys and code wrapping back into the markup."""
    for dfn in doc.definitions:
        tag = dfn.node
        if not isinstance(tag, Tag):
            continue
        if dfn.id:
            tag["id"] = dfn.id
        if dfn.citation_key:
            tag["data-cite"] = dfn.citation_key

    for ref in doc.references:
        tag = ref.node
        if not isinstance(tag, Tag):
            continue
        if ref.citation_key:
            tag["data-cite"] = ref.citation_key
        if ref.outcome is None:
            continue
        if ref.outcome == "resolved-internal" and ref.href:
            tag["href"] = ref.href
            _add_class(tag, "internalDFN")
        elif ref.outcome == "resolved-external-classlabel" and ref.label:
            tag["data-lt"] = ref.label
        if ref.link_type and not tag.has_attr("data-link-type"):
            tag["data-link-type"] = ref.link_type
        if ref.wrap_as_code:
            _wrap_inner(doc.soup, tag, "code")
