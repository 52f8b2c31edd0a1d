"""Tests for domain value objects (FileExtension, TagSet)."""

import pytest

from app.domain.value_objects.core import FileExtension, TagSet


class TestFileExtension:
    """FileExtension: 1-10 lowercase letters or digits, no dot."""

    def test_valid_extensions(self) -> None:
        FileExtension("jpg")
        FileExtension("heic")
        FileExtension("mp4")
        FileExtension("a" * 10)

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            FileExtension("")

    def test_invalid_format_rejected(self) -> None:
        for bad in ("JPG", ".jpg", "jp g", "a" * 11, "../x"):
            with pytest.raises(ValueError, match="1-10"):
                FileExtension(bad)

    def test_parse_normalizes(self) -> None:
        assert FileExtension.parse(".JPG").value == "jpg"
        assert FileExtension.parse(" png ").value == "png"

    def test_parse_none_rejected(self) -> None:
        with pytest.raises(ValueError):
            FileExtension.parse(None)


class TestTagSet:
    """TagSet: trimmed, de-duplicated, bounded."""

    def test_parse_list_trims_and_deduplicates(self) -> None:
        tags = TagSet.parse([" sea ", "sea", "", "  ", "sky"])
        assert tags.values == frozenset({"sea", "sky"})

    def test_parse_comma_string(self) -> None:
        assert TagSet.parse("sea, sky,,sea").values == frozenset({"sea", "sky"})

    def test_parse_none_is_empty(self) -> None:
        assert TagSet.parse(None).values == frozenset()

    def test_tags_are_case_sensitive(self) -> None:
        assert TagSet.parse(["Sea", "sea"]).values == frozenset({"Sea", "sea"})

    def test_tag_too_long_rejected(self) -> None:
        with pytest.raises(ValueError, match="50"):
            TagSet.parse(["x" * 51])

    def test_too_many_tags_rejected(self) -> None:
        with pytest.raises(ValueError, match="at most"):
            TagSet.parse([f"t{i}" for i in range(31)])

    def test_empty_tag_rejected_on_direct_construction(self) -> None:
        with pytest.raises(ValueError, match="non-empty"):
            TagSet(frozenset({""}))
