"""Object key generation for stored photo bytes."""

import os

from app.domain.exceptions import ValidationException
from app.domain.value_objects.core import FileExtension
from app.shared.utils.generators import generate_object_token

DEFAULT_PREFIX = "photos"


def extension_from_filename(filename: str) -> str:
    """Return the extension of a client filename ('IMG_01.JPG' -> 'JPG').

    Path components are ignored. Raises ValidationException when there is no extension.
    """
    name = os.path.basename((filename or "").replace("\\", "/")).strip()
    stem, dot, ext = name.rpartition(".")
    if not dot or not stem or not ext:
        raise ValidationException(
            "Filename must include a file extension", field="filename"
        )
    return ext


class ObjectKeyScheme:
    """Generates unique object keys: '<prefix>/<uuid4>.<ext>'.

    Pure: no store access. Keys are never reused, so deleting one photo's
    object can never invalidate another photo.
    """

    def __init__(self, prefix: str = DEFAULT_PREFIX) -> None:
        prefix = prefix.strip().strip("/")
        if not prefix:
            raise ValueError("Object key prefix must be non-empty")
        self.prefix = prefix

    def new_key(self, extension: str) -> str:
        """Return a new key for an object with the given extension.

        Raises:
            ValidationException: Extension empty or malformed.
        """
        try:
            ext = FileExtension.parse(extension)
        except ValueError as e:
            raise ValidationException(str(e), field="extension") from e
        return f"{self.prefix}/{generate_object_token()}.{ext.value}"

    def owns(self, object_key: str) -> bool:
        """Return whether object_key lives under this scheme's prefix."""
        return object_key.startswith(f"{self.prefix}/") and ".." not in object_key
