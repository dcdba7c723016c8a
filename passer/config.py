"""
Passer client configuration.
"""

from dataclasses import dataclass

from passer.models.upload import TTL

MIB = 1024 * 1024


@dataclass(frozen=True, kw_only=True)
class PasserConfig:
    """
    Attributes:
        api_url: Base URL of the secret storage API (trailing slash included).
        web_url: Base URL used when composing shareable links.
        timeout: Request timeout in seconds.
        user_agent: User-Agent header value.
        max_item_size: Largest accepted single item, in bytes.
        max_total_size: Largest accepted sum of encrypted packs, in bytes.
        default_ttl: Expiry level used when none is given at upload time.
    """

    api_url: str = "http://localhost/api/"
    web_url: str = "http://localhost"
    timeout: float = 30.0
    user_agent: str = "Passer-Python/0.1"
    max_item_size: int = 100 * MIB
    max_total_size: int = 100 * MIB
    default_ttl: TTL = TTL.ONE_DAY

    def __post_init__(self) -> None:
        if not self.api_url.endswith("/"):
            msg = "api_url must end with '/'"
            raise ValueError(msg)
        if self.timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)
        if self.max_item_size <= 0:
            msg = "max_item_size must be positive"
            raise ValueError(msg)
        if self.max_total_size < self.max_item_size:
            msg = "max_total_size must not be smaller than max_item_size"
            raise ValueError(msg)
        if not isinstance(self.default_ttl, TTL):
            msg = "default_ttl must be a TTL level"
            raise ValueError(msg)
