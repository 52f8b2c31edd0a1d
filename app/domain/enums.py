"""Domain enumerations for the photo catalog.

Enums represent fixed sets of domain values (e.g. grant operation).
"""

from enum import Enum


class GrantMethod(str, Enum):
    """HTTP method a grant authorizes against the object store.

    A grant authorizes exactly one kind of transfer for exactly one key.
    """

    PUT = "PUT"
    GET = "GET"


class Inconsistency(str, Enum):
    """Kinds of cross-store inconsistency a failed compensating step can leave."""

    DANGLING_REFERENCE = "dangling_reference"
    ORPHANED_OBJECT = "orphaned_object"
