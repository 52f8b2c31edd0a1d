"""ID generators: CUID2 for row ids, UUID4 strings for object keys."""

import uuid

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()


def generate_cuid() -> str:
    """Generate a collision-resistant unique identifier (CUID2) for a catalog row.

    Returns:
        A new CUID string.
    """
    result = cuid_generator()
    if not isinstance(result, str):
        raise TypeError(
            f"Expected str from cuid_generator, got {type(result).__name__}"
        )
    return result


def generate_object_token() -> str:
    """Return a random UUID4 string used as the unique part of an object key."""
    return str(uuid.uuid4())
