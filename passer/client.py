"""
Passer client facade.

Owns the HTTP client, the key codec and the size policy, and hands them to
the encryption and retrieval sessions it creates.
"""

import asyncio
from typing import Self

import httpx
import structlog

from passer.api.http_client import AsyncHttpClient
from passer.config import PasserConfig
from passer.crypto.aes_gcm import AesGcmEngine
from passer.crypto.key_codec import KeyCodec
from passer.crypto.protocol import CryptoEngine
from passer.models.retrieval import RetrievalStatus
from passer.services.encryption_session import EncryptionSession
from passer.services.retrieval_service import RetrievalSession
from passer.services.size_budget import SizeBudget

logger = structlog.get_logger(__name__)


class PasserClient:
    """
    Async client for sharing one-time secrets.

    Example:
        ```python
        async with PasserClient(PasserConfig(api_url="https://host/api/")) as client:
            session = client.new_encryption_session()
            await session.add_text("the secret")
            result = await session.upload()

        async with PasserClient() as client:
            retrieval = await client.open_link(result.quick_link)
            for item in retrieval.items:
                print(item.name, item.text)
        ```

    Args:
        config: Client configuration. Uses defaults if not provided.
        transport: Optional httpx transport for testing (mock transport).
        engine: Crypto engine. Defaults to AES-256-GCM.
    """

    def __init__(
        self,
        config: PasserConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        engine: CryptoEngine | None = None,
    ) -> None:
        self._config = config or PasserConfig()
        self._http = AsyncHttpClient(self._config, transport=transport)
        self._codec = KeyCodec(engine or AesGcmEngine(), self._config.web_url)
        self._budget = SizeBudget.from_config(self._config)

        self._encryption_sessions: list[EncryptionSession] = []
        self._retrieval_sessions: list[RetrievalSession] = []
        self._initialized = False
        self._init_lock = asyncio.Lock()

    async def __aenter__(self) -> Self:
        """Enter async context."""
        await self._ensure_initialized()
        return self

    async def __aexit__(
        self, exc_type: type | None, exc_val: BaseException | None, exc_tb: object
    ) -> None:
        """Exit async context."""
        await self.close()

    async def _ensure_initialized(self) -> None:
        async with self._init_lock:
            if self._initialized:
                return
            await self._http.__aenter__()
            self._initialized = True
            logger.debug("Client initialized")

    async def close(self) -> None:
        """Dispose every session and release the HTTP client."""
        async with self._init_lock:
            for session in self._encryption_sessions:
                session.close()
            for retrieval in self._retrieval_sessions:
                retrieval.dispose()
            self._encryption_sessions = []
            self._retrieval_sessions = []

            if self._initialized:
                await self._http.__aexit__(None, None, None)
                self._initialized = False
            logger.debug("Client closed")

    @property
    def config(self) -> PasserConfig:
        return self._config

    @property
    def codec(self) -> KeyCodec:
        return self._codec

    def new_encryption_session(self) -> EncryptionSession:
        """Create an encryption session with a fresh key."""
        session = EncryptionSession(
            self._http,
            self._codec,
            self._budget,
            default_ttl=self._config.default_ttl,
        )
        self._encryption_sessions = [*self._encryption_sessions, session]
        return session

    async def open_link(self, link: str, key_text: str | None = None) -> RetrievalSession:
        """
        Start retrieving a link.

        The returned session has already downloaded the payload (and decrypted
        it, for quick links) unless it ended in a terminal failure state.

        Args:
            link: Quick or stepped link, or its bare path segment.
            key_text: Key for a stepped link, applied once the payload is downloaded.
        """
        await self._ensure_initialized()
        session = RetrievalSession(self._http, self._codec, link)
        self._retrieval_sessions = [*self._retrieval_sessions, session]
        status = await session.start()
        if key_text is not None and status is RetrievalStatus.DOWNLOADED:
            await session.decrypt(key_text)
        return session
