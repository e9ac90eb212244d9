"""Tests for dfnlink.citations — normative/informative reconciliation."""
from dfnlink.citations import (
    SELF_CITATION_KEY,
    reconcile_references,
    rewrite_self_citation,
    self_citation_pattern,
    to_cite_details,
)
from dfnlink.link_types import RawDefinition, Reference


def _ref(key: str | None, *, informative: bool = False) -> Reference:
    return Reference(text="x", citation_key=key, informative=informative)


class TestToCiteDetails:
    def test_plain_key_normative_by_default(self) -> None:
        details = to_cite_details("DOM")
        assert details.key == "DOM"
        assert details.is_normative

    def test_informative_context(self) -> None:
        assert not to_cite_details("DOM", informative=True).is_normative

    def test_bang_forces_normative(self) -> None:
        details = to_cite_details("!DOM#concept-event", informative=True)
        assert details.is_normative
        assert details.key == "DOM"
        assert details.frag == "concept-event"

    def test_question_forces_informative(self) -> None:
        details = to_cite_details("?FETCH/fetch.html#x")
        assert not details.is_normative
        assert details.key == "FETCH"
        assert details.path == "/fetch.html"
        assert details.frag == "x"


class TestSelfCitation:
    def test_whole_word_case_insensitive(self) -> None:
        pattern = self_citation_pattern("my-spec")
        assert rewrite_self_citation("MY-SPEC#foo", pattern) == f"{SELF_CITATION_KEY}#foo"
        assert rewrite_self_citation("my-specs", pattern) == "my-specs"

    def test_empty_short_name_disables_rewrite(self) -> None:
        assert self_citation_pattern("") is None
        assert rewrite_self_citation("DOM", None) == "DOM"


class TestReconcileReferences:
    def test_self_citation_excluded(self) -> None:
        normative: set[str] = set()
        informative: set[str] = set()
        ref = _ref("MY-SPEC")
        reconcile_references(
            [ref], short_name="my-spec", normative=normative, informative=informative
        )
        assert normative == set()
        assert informative == set()
        assert ref.citation_key == SELF_CITATION_KEY

    def test_normative_wins(self) -> None:
        normative: set[str] = set()
        informative: set[str] = set()
        records = [_ref("DOM", informative=True), _ref("DOM")]
        reconcile_references(
            records, short_name="my-spec", normative=normative, informative=informative
        )
        assert normative == {"DOM"}
        assert informative == set()

    def test_informative_after_normative_stays_normative(self) -> None:
        normative: set[str] = {"DOM"}
        informative: set[str] = set()
        reconcile_references(
            [_ref("DOM", informative=True)],
            short_name="my-spec",
            normative=normative,
            informative=informative,
        )
        assert normative == {"DOM"}
        assert informative == set()

    def test_definitions_and_references_both_counted(self) -> None:
        normative: set[str] = set()
        informative: set[str] = set()
        records = [
            RawDefinition(title="event", citation_key="?DOM"),
            _ref("FETCH"),
            _ref(""),
            _ref(None),
        ]
        seen = reconcile_references(
            records, short_name="my-spec", normative=normative, informative=informative
        )
        assert seen == 2
        assert normative == {"FETCH"}
        assert informative == {"DOM"}

    def test_idempotent(self) -> None:
        normative: set[str] = set()
        informative: set[str] = set()
        records = [_ref("my-spec"), _ref("DOM", informative=True), _ref("!HTML"), _ref("URL")]
        reconcile_references(
            records, short_name="my-spec", normative=normative, informative=informative
        )
        first = (set(normative), set(informative))
        reconcile_references(
            records, short_name="my-spec", normative=normative, informative=informative
        )
        assert (normative, informative) == first
        assert first == ({"HTML", "URL"}, {"DOM"})
