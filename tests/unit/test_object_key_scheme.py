"""ObjectKeyScheme and extension_from_filename unit tests."""

import re

import pytest

from app.application.services.object_key_scheme import (
    ObjectKeyScheme,
    extension_from_filename,
)
from app.domain.exceptions import ValidationException

_KEY_RE = re.compile(r"^photos/[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}\.jpg$")


class TestNewKey:
    """Tests for ObjectKeyScheme.new_key."""

    def test_key_format(self) -> None:
        assert _KEY_RE.match(ObjectKeyScheme().new_key("jpg"))

    def test_extension_normalized(self) -> None:
        assert ObjectKeyScheme().new_key(".JPG").endswith(".jpg")

    def test_keys_are_unique(self) -> None:
        scheme = ObjectKeyScheme()
        assert len({scheme.new_key("png") for _ in range(200)}) == 200

    def test_custom_prefix(self) -> None:
        key = ObjectKeyScheme("/gallery/").new_key("webp")
        assert key.startswith("gallery/")
        assert key.endswith(".webp")

    @pytest.mark.parametrize("ext", ["", ".", "j p g", "jpg/../x", "a" * 11])
    def test_malformed_extension_raises(self, ext: str) -> None:
        with pytest.raises(ValidationException) as exc_info:
            ObjectKeyScheme().new_key(ext)
        assert exc_info.value.details == {"field": "extension"}

    def test_empty_prefix_rejected(self) -> None:
        with pytest.raises(ValueError):
            ObjectKeyScheme(" / ")


class TestOwns:
    """Tests for ObjectKeyScheme.owns."""

    def test_owns_key_under_prefix(self) -> None:
        assert ObjectKeyScheme().owns("photos/abc.jpg")

    def test_rejects_other_prefix(self) -> None:
        assert not ObjectKeyScheme().owns("photosx/abc.jpg")
        assert not ObjectKeyScheme().owns("other/abc.jpg")

    def test_rejects_traversal(self) -> None:
        assert not ObjectKeyScheme().owns("photos/../secrets.jpg")


class TestExtensionFromFilename:
    """Tests for extension_from_filename."""

    def test_last_dot_wins(self) -> None:
        assert extension_from_filename("holiday.beach.HEIC") == "HEIC"

    def test_path_is_ignored(self) -> None:
        assert extension_from_filename("C:\\Users\\me\\pic.png") == "png"
        assert extension_from_filename("/tmp/dir.d/pic.gif") == "gif"

    @pytest.mark.parametrize("name", ["noext", ".bashrc", "trailing.", "", "dir.d/noext"])
    def test_no_extension_raises(self, name: str) -> None:
        with pytest.raises(ValidationException) as exc_info:
            extension_from_filename(name)
        assert exc_info.value.details == {"field": "filename"}
