"""
Retrieval session models.
"""

from enum import Enum, auto


class RetrievalStatus(Enum):
    """States of a retrieval session."""

    DOWNLOADING = auto()
    INVALID_LINK = auto()
    NOT_FOUND = auto()
    CORRUPTED = auto()
    DOWNLOADED = auto()
    DECRYPTING = auto()
    DECRYPTED = auto()

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL

    @property
    def explanation(self) -> str:
        """User-facing explanation for the state."""
        match self:
            case RetrievalStatus.INVALID_LINK:
                return "Make sure you have the correct link"
            case RetrievalStatus.NOT_FOUND:
                return "Make sure you have the correct link and that it was not accessed before"
            case RetrievalStatus.CORRUPTED:
                return "The data was downloaded but it was corrupted"
            case RetrievalStatus.DOWNLOADING:
                return "Downloading"
            case RetrievalStatus.DOWNLOADED:
                return "Insert the decryption key shared with you"
            case RetrievalStatus.DECRYPTING:
                return "Decrypting"
            case RetrievalStatus.DECRYPTED:
                return "Decrypted"


_TERMINAL = frozenset(
    {
        RetrievalStatus.INVALID_LINK,
        RetrievalStatus.NOT_FOUND,
        RetrievalStatus.CORRUPTED,
        RetrievalStatus.DECRYPTED,
    }
)
