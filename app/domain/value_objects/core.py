"""Domain value objects for the photo catalog.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import ClassVar

_EXTENSION_RE = re.compile(r"^[a-z0-9]{1,10}$")


@dataclass(frozen=True)
class FileExtension:
    """Value object for an object-key file extension.

    Lower-cased, no leading dot, 1-10 ASCII letters or digits (e.g. 'jpg', 'heic').
    """

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("File extension must be a non-empty string")
        if not _EXTENSION_RE.match(self.value):
            raise ValueError(
                "File extension must be 1-10 lowercase letters or digits (e.g., 'jpg')"
            )

    @classmethod
    def parse(cls, raw: str | None) -> "FileExtension":
        """Normalize raw input ('.JPG', 'jpg', ' png ') and validate."""
        value = (raw or "").strip().lstrip(".").lower()
        return cls(value)


@dataclass(frozen=True)
class TagSet:
    """Value object for a photo's tags: unordered, de-duplicated, trimmed.

    Empty entries are dropped. Each tag is at most MAX_TAG_LENGTH characters.
    """

    MAX_TAG_LENGTH: ClassVar[int] = 50
    MAX_TAGS: ClassVar[int] = 30

    values: frozenset[str]

    def __post_init__(self) -> None:
        if len(self.values) > self.MAX_TAGS:
            raise ValueError(f"A photo can have at most {self.MAX_TAGS} tags")
        for tag in self.values:
            if not tag:
                raise ValueError("Tags must be non-empty strings")
            if len(tag) > self.MAX_TAG_LENGTH:
                raise ValueError(
                    f"Tag cannot be more than {self.MAX_TAG_LENGTH} characters"
                )

    @classmethod
    def parse(cls, raw: Iterable[str] | str | None) -> "TagSet":
        """Build from a list of tags or a comma-separated string."""
        if raw is None:
            return cls(frozenset())
        items = raw.split(",") if isinstance(raw, str) else raw
        return cls(frozenset(t.strip() for t in items if t and t.strip()))
