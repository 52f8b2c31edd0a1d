"""Application interfaces (ports): repository and storage protocols.

Define contracts for infrastructure implementations (DIP).
"""

from app.application.interfaces.repositories import IPhotoRepository
from app.application.interfaces.storage import IStorageService

__all__ = [
    "IPhotoRepository",
    "IStorageService",
]
