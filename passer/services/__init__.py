"""
Business logic services for Passer.
"""

from passer.services.encryption_service import EncryptionPipeline, PackResult
from passer.services.encryption_session import EncryptionSession
from passer.services.retrieval_service import RetrievalSession
from passer.services.size_budget import SizeBudget, ttl_to_wire_code
from passer.services.upload_service import UploadCoordinator

__all__ = [
    "EncryptionPipeline",
    "EncryptionSession",
    "PackResult",
    "RetrievalSession",
    "SizeBudget",
    "UploadCoordinator",
    "ttl_to_wire_code",
]
