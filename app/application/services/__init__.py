"""Application services: object key scheme and grant issuance."""

from app.application.services.grant_issuer import GrantIssuer
from app.application.services.object_key_scheme import (
    ObjectKeyScheme,
    extension_from_filename,
)

__all__ = [
    "GrantIssuer",
    "ObjectKeyScheme",
    "extension_from_filename",
]
