"""Expand a reference into the ordered {title, scope} candidates to try."""

from __future__ import annotations

from collections.abc import Iterable

from dfnlink.link_types import LinkTarget


EMPTY_STRING_TITLE = "the-empty-string"


def normalize_label(text: str) -> str:
    return " ".join((text or "").split()).lower()


def reference_titles(
    text: str,
    *,
    labels: Iterable[str] = (),
    abbr_title: str | None = None,
    no_default: bool = False,
) -> list[str]:
    """Titles a reference (or definition) answers to, most specific first.

    Explicit ``|``-separated labels win over an ``<abbr title>``; the
    normalized text content is always added unless *no_default* is set.
    """
    titles: dict[str, None] = {}
    label_list = [normalize_label(label) for label in labels]
    if label_list:
        for label in label_list:
            titles[label] = None
    elif abbr_title:
        titles[abbr_title] = None
    elif text == '""':
        titles[EMPTY_STRING_TITLE] = None
    if not no_default:
        titles[normalize_label(text)] = None
    titles.pop("", None)
    return list(titles)


def split_labels(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(raw.split("|"))


def expand_link_targets(
    titles: Iterable[str],
    *,
    link_for: str = "",
    has_scope_ancestor: bool = False,
) -> tuple[LinkTarget, ...]:
    """Candidates in resolution order for each title.

    ``Interface.member`` spellings are tried first as (Interface, member),
    then the inherited scope, then the title as its own scope when no
    scope was inherited, and finally the unscoped title.
    """
    targets: list[LinkTarget] = []
    for title in titles:
        parts = title.split(".")
        if len(parts) == 2:
            targets.append(LinkTarget(title=parts[1], scope=parts[0]))
        targets.append(LinkTarget(title=title, scope=link_for))
        if not has_scope_ancestor:
            targets.append(LinkTarget(title=title, scope=title))
        if link_for != "":
            targets.append(LinkTarget(title=title, scope=""))
    return tuple(targets)
