"""Secret storage endpoints (store once, fetch once)."""

import structlog

from passer.api.http_client import AsyncHttpClient, redact_id
from passer.crypto.key_codec import RESOURCE_ID_LENGTH
from passer.exceptions import APIError, NotFoundError, UploadError
from passer.models.upload import TTL

logger = structlog.get_logger(__name__)


async def store_secret(http: AsyncHttpClient, payload: bytes, ttl: TTL) -> str:
    """
    Store a wire payload and return its server-assigned resource id.

    Raises:
        UploadError: If the server refuses the payload or answers with a malformed id.
        NetworkError: If the request fails at the transport level.
    """
    try:
        body = await http.request("POST", "", content=payload, params={"ttl": ttl.wire_code})
    except APIError as e:
        msg = f"Server refused the payload: {e.message}"
        raise UploadError(msg, code=e.code, endpoint=e.endpoint) from e

    resource_id = body.decode("ascii", errors="replace").strip()
    if len(resource_id) != RESOURCE_ID_LENGTH:
        msg = "Server returned a malformed resource id"
        raise UploadError(msg, code=0, endpoint="POST")

    logger.debug("Secret stored", resource_id=redact_id(resource_id), ttl=ttl.wire_code)
    return resource_id


async def fetch_secret(http: AsyncHttpClient, resource_id: str) -> bytes:
    """
    Fetch a wire payload. The server deletes it after the first success.

    Absent, already consumed and expired secrets are indistinguishable, so any
    non-success status is reported as not found.

    Raises:
        NotFoundError: If the server answers with any non-success status.
        NetworkError: If the request fails at the transport level.
    """
    try:
        return await http.request("GET", resource_id)
    except NotFoundError:
        raise
    except APIError as e:
        msg = f"Secret not available: {e.message}"
        raise NotFoundError(msg, code=e.code, endpoint=e.endpoint) from e
