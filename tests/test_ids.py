"""Tests for dfnlink.ids."""
from dfnlink.ids import IdAllocator, slugify_id
from dfnlink.link_types import RawDefinition


class TestSlugifyId:
    def test_prefix_and_lowercase(self) -> None:
        assert slugify_id("Event Target", "dfn") == "dfn-event-target"

    def test_strips_diacritics(self) -> None:
        assert slugify_id("Café", "dfn") == "dfn-cafe"

    def test_empty_text(self) -> None:
        assert slugify_id("", "dfn") == "dfn-generatedID"

    def test_leading_digit_without_prefix(self) -> None:
        assert slugify_id("2d context") == "x2d-context"

    def test_punctuation_collapsed(self) -> None:
        assert slugify_id("foo()", "dfn") == "dfn-foo"

    def test_trailing_dot_dropped(self) -> None:
        assert slugify_id("etc.", "dfn") == "dfn-etc"


class TestIdAllocator:
    def test_collision_suffix(self) -> None:
        ids = IdAllocator(["dfn-token"])
        assert ids.allocate("token", "dfn") == "dfn-token-0"
        assert ids.allocate("token", "dfn") == "dfn-token-1"

    def test_assign_is_idempotent(self) -> None:
        ids = IdAllocator()
        dfn = RawDefinition(title="Token")
        first = ids.assign(dfn, "Token")
        second = ids.assign(dfn, "Token")
        assert first == second == "dfn-token"
        assert dfn.id == "dfn-token"

    def test_existing_id_kept_and_reserved(self) -> None:
        ids = IdAllocator()
        dfn = RawDefinition(title="Token", id="custom")
        assert ids.assign(dfn, "Token") == "custom"
        assert "custom" in ids
