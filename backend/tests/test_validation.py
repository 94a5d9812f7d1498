"""
ReferenceHub Backend — Submission Validator Unit Tests
======================================================

What:  Tests for validate_entry_input and the tag helpers.
How:   Pure functions, no fixtures needed.

What we test:
    ✅ URL required / URL format, checked first
    ✅ Note rules in both entry shapes
    ✅ Context and slide URL rules (current shape only)
    ✅ Tag splitting, trimming, truncation to five, length limit
"""

import pytest

from referencehub.exceptions import ValidationError
from referencehub.schemas.entry import SchemaVersion
from referencehub.services.validation import (
    MSG_CONTEXT_REQUIRED,
    MSG_CONTEXT_TOO_LONG,
    MSG_NOTE_REQUIRED,
    MSG_NOTE_TOO_LONG,
    MSG_SLIDE_URL_FORMAT,
    MSG_TAG_TOO_LONG,
    MSG_URL_FORMAT,
    MSG_URL_REQUIRED,
    coerce_tags_input,
    normalize_tags,
    validate_entry_input,
)


def _valid(**overrides):
    data = {"url": "https://example.com/a", "context": "Used in a workshop"}
    data.update(overrides)
    return data


class TestUrlRules:
    """URL is validated before every other field."""

    @pytest.mark.parametrize("value", [None, "", "   ", 42])
    def test_missing_url(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_entry_input(_valid(url=value))
        assert exc_info.value.message == MSG_URL_REQUIRED
        assert exc_info.value.field == "url"

    def test_malformed_url(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_entry_input(_valid(url="not a url"))
        assert exc_info.value.message == MSG_URL_FORMAT
        assert exc_info.value.field == "url"

    def test_url_error_wins_over_later_fields(self):
        """First violated rule is the one reported."""
        with pytest.raises(ValidationError) as exc_info:
            validate_entry_input({"url": "not a url", "context": "", "tags": "x" * 30})
        assert exc_info.value.field == "url"

    def test_url_is_trimmed(self):
        result = validate_entry_input(_valid(url="  https://example.com/a  "))
        assert result.url == "https://example.com/a"


class TestNoteRules:
    def test_note_optional_in_current_shape(self):
        result = validate_entry_input(_valid())
        assert result.note is None

    def test_blank_note_is_absent(self):
        result = validate_entry_input(_valid(note="   "))
        assert result.note is None

    def test_note_too_long(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_entry_input(_valid(note="n" * 501))
        assert exc_info.value.message == MSG_NOTE_TOO_LONG

    def test_note_length_counts_trimmed_text(self):
        result = validate_entry_input(_valid(note="  " + "n" * 500 + "  "))
        assert result.note == "n" * 500

    def test_note_required_in_legacy_shape(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_entry_input({"url": "https://example.com"}, SchemaVersion.LEGACY)
        assert exc_info.value.message == MSG_NOTE_REQUIRED
        assert exc_info.value.field == "note"

    def test_legacy_shape_ignores_context_and_slides(self):
        result = validate_entry_input(
            {"url": "https://example.com", "note": "good read", "slideUrl": "not a url"},
            SchemaVersion.LEGACY,
        )
        assert result.note == "good read"
        assert result.context is None
        assert result.slide_url is None

    def test_shape_is_not_carried_on_the_result(self):
        result = validate_entry_input(_valid(), SchemaVersion.CURRENT)
        assert "version" not in type(result).model_fields


class TestContextAndSlides:
    @pytest.mark.parametrize("value", [None, "", "    "])
    def test_context_required(self, value):
        with pytest.raises(ValidationError) as exc_info:
            validate_entry_input(_valid(context=value))
        assert exc_info.value.message == MSG_CONTEXT_REQUIRED
        assert exc_info.value.field == "context"

    def test_context_too_long(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_entry_input(_valid(context="c" * 501))
        assert exc_info.value.message == MSG_CONTEXT_TOO_LONG

    def test_note_checked_before_context(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_entry_input({"url": "https://example.com", "note": "n" * 501})
        assert exc_info.value.field == "note"

    def test_invalid_slide_url(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_entry_input(_valid(slideUrl="slides please"))
        assert exc_info.value.message == MSG_SLIDE_URL_FORMAT
        assert exc_info.value.field == "slideUrl"

    def test_blank_slide_url_is_absent(self):
        assert validate_entry_input(_valid(slideUrl="  ")).slide_url is None

    def test_slide_url_kept(self):
        result = validate_entry_input(_valid(slideUrl=" https://slides.example.com/deck "))
        assert result.slide_url == "https://slides.example.com/deck"


class TestTags:
    def test_comma_separated_string(self):
        result = validate_entry_input(_valid(tags="a,b,c,d,e,f"))
        assert result.tags == ["a", "b", "c", "d", "e"]

    def test_seven_tags_keep_first_five_trimmed(self):
        result = validate_entry_input(_valid(tags=" one , two,three ,four,five,six,seven"))
        assert result.tags == ["one", "two", "three", "four", "five"]

    def test_empties_dropped_and_duplicates_kept(self):
        assert normalize_tags("x,,  ,x, y") == ["x", "x", "y"]

    def test_list_input_with_non_strings(self):
        result = validate_entry_input(_valid(tags=["alpha", 3, " beta ", None]))
        assert result.tags == ["alpha", "beta"]

    @pytest.mark.parametrize("value", [None, 12, {"a": 1}])
    def test_other_types_mean_no_tags(self, value):
        assert coerce_tags_input(value) == ""
        assert validate_entry_input(_valid(tags=value)).tags == []

    def test_tag_too_long(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_entry_input(_valid(tags="ok," + "t" * 21))
        assert exc_info.value.message == MSG_TAG_TOO_LONG
        assert exc_info.value.field == "tags"

    def test_long_tag_beyond_fifth_is_dropped_not_rejected(self):
        result = validate_entry_input(_valid(tags="a,b,c,d,e," + "t" * 21))
        assert result.tags == ["a", "b", "c", "d", "e"]

    def test_twenty_characters_allowed(self):
        assert validate_entry_input(_valid(tags="t" * 20)).tags == ["t" * 20]
