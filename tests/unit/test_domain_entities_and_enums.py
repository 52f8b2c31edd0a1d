"""Tests for the photo entity and domain enums."""

import pytest

from app.domain.entities.photo import (
    DESCRIPTION_MAX_LENGTH,
    OBJECT_KEY_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    PhotoEntity,
)
from app.domain.enums import GrantMethod, Inconsistency
from app.domain.exceptions import ValidationException


def _entity(**overrides) -> PhotoEntity:
    values = {"title": "A", "description": "B", "object_key": "photos/abc.jpg"}
    values.update(overrides)
    return PhotoEntity(**values)


class TestPhotoEntity:
    def test_valid_entity(self) -> None:
        photo = _entity(tags=frozenset({"x", "y"}), location="Oslo", camera="X100")
        assert photo.title == "A"
        assert photo.tags == frozenset({"x", "y"})

    @pytest.mark.parametrize("field", ["title", "description"])
    @pytest.mark.parametrize("value", ["", "   "])
    def test_required_text_missing(self, field: str, value: str) -> None:
        with pytest.raises(ValidationException) as exc_info:
            _entity(**{field: value})
        assert exc_info.value.details == {"field": field}
        assert exc_info.value.message == f"Please add a {field}"

    def test_title_at_limit_allowed(self) -> None:
        _entity(title="t" * TITLE_MAX_LENGTH)

    def test_title_too_long(self) -> None:
        with pytest.raises(ValidationException, match="100"):
            _entity(title="t" * (TITLE_MAX_LENGTH + 1))

    def test_description_too_long(self) -> None:
        with pytest.raises(ValidationException, match="500"):
            _entity(description="d" * (DESCRIPTION_MAX_LENGTH + 1))

    def test_object_key_required(self) -> None:
        with pytest.raises(ValidationException) as exc_info:
            _entity(object_key=" ")
        assert exc_info.value.details == {"field": "object_key"}

    def test_object_key_too_long(self) -> None:
        with pytest.raises(ValidationException):
            _entity(object_key="k" * (OBJECT_KEY_MAX_LENGTH + 1))

    def test_location_too_long(self) -> None:
        with pytest.raises(ValidationException) as exc_info:
            _entity(location="l" * 256)
        assert exc_info.value.details == {"field": "location"}

    def test_bad_tags_reported_on_tags_field(self) -> None:
        with pytest.raises(ValidationException) as exc_info:
            _entity(tags=frozenset({"x" * 51}))
        assert exc_info.value.details == {"field": "tags"}


class TestEnums:
    def test_grant_method_values(self) -> None:
        assert GrantMethod.PUT.value == "PUT"
        assert GrantMethod.GET == "GET"

    def test_inconsistency_values(self) -> None:
        assert [kind.value for kind in Inconsistency] == [
            "dangling_reference",
            "orphaned_object",
        ]
