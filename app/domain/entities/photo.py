"""Photo domain entity.

Represents a catalog record independent of persistence. Field rules mirror
the photo table constraints so validation fails before any store is touched.
"""

from dataclasses import dataclass, field

from app.domain.exceptions import ValidationException
from app.domain.value_objects.core import TagSet

TITLE_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
OPTIONAL_TEXT_MAX_LENGTH = 255
OBJECT_KEY_MAX_LENGTH = 512


def _validate_required_text(value: str | None, field_name: str, max_length: int) -> None:
    label = field_name.capitalize()
    if value is None or not value.strip():
        raise ValidationException(f"Please add a {field_name}", field=field_name)
    if len(value) > max_length:
        raise ValidationException(
            f"{label} cannot be more than {max_length} characters", field=field_name
        )


def _validate_optional_text(value: str | None, field_name: str) -> None:
    if value is not None and len(value) > OPTIONAL_TEXT_MAX_LENGTH:
        raise ValidationException(
            f"{field_name.capitalize()} cannot be more than "
            f"{OPTIONAL_TEXT_MAX_LENGTH} characters",
            field=field_name,
        )


@dataclass
class PhotoEntity:
    """Domain entity for a photo's user-editable fields plus its bound object key.

    Validation runs on construction; build a new entity from merged values to
    validate an update before committing it.
    """

    title: str
    description: str
    object_key: str
    tags: frozenset[str] = field(default_factory=frozenset)
    location: str | None = None
    camera: str | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate photo business rules. Raises ValidationException if invalid."""
        _validate_required_text(self.title, "title", TITLE_MAX_LENGTH)
        _validate_required_text(self.description, "description", DESCRIPTION_MAX_LENGTH)
        if not self.object_key or not self.object_key.strip():
            raise ValidationException("Object key is required", field="object_key")
        if len(self.object_key) > OBJECT_KEY_MAX_LENGTH:
            raise ValidationException(
                f"Object key cannot be more than {OBJECT_KEY_MAX_LENGTH} characters",
                field="object_key",
            )
        _validate_optional_text(self.location, "location")
        _validate_optional_text(self.camera, "camera")
        try:
            TagSet(frozenset(self.tags))
        except ValueError as e:
            raise ValidationException(str(e), field="tags") from e

