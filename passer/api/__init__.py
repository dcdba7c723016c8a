"""
Storage API client layer.

Provides async HTTP communication with the secret storage server.
"""

from passer.api.endpoints import fetch_secret, store_secret
from passer.api.http_client import AsyncHttpClient, redact_id

__all__ = ["AsyncHttpClient", "fetch_secret", "redact_id", "store_secret"]
