import pytest

from passer.models.link import LinkDescriptor, LinkKind
from passer.models.retrieval import RetrievalStatus


@pytest.mark.parametrize(
    ("status", "terminal"),
    [
        (RetrievalStatus.DOWNLOADING, False),
        (RetrievalStatus.INVALID_LINK, True),
        (RetrievalStatus.NOT_FOUND, True),
        (RetrievalStatus.CORRUPTED, True),
        (RetrievalStatus.DOWNLOADED, False),
        (RetrievalStatus.DECRYPTING, False),
        (RetrievalStatus.DECRYPTED, True),
    ],
)
def test_terminal_states(status: RetrievalStatus, terminal: bool) -> None:
    assert status.is_terminal is terminal
    assert status.explanation


def test_failure_explanations_are_distinct() -> None:
    explanations = {
        RetrievalStatus.INVALID_LINK.explanation,
        RetrievalStatus.NOT_FOUND.explanation,
        RetrievalStatus.CORRUPTED.explanation,
    }

    assert len(explanations) == 3


def test_link_descriptor_kind_and_repr() -> None:
    quick = LinkDescriptor(resource_id="abc", key_text="the-key")
    stepped = LinkDescriptor(resource_id="abc")

    assert quick.kind is LinkKind.QUICK
    assert stepped.kind is LinkKind.STEPPED
    assert "the-key" not in repr(quick)
    assert "***" in repr(quick)
