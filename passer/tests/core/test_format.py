import pytest

from passer.core.format import size_to_string


@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (0, "0 B"),
        (1023, "1023 B"),
        (1024, "1.0 KiB"),
        (1536, "1.5 KiB"),
        (1024 * 1024, "1.0 MiB"),
        (100 * 1024 * 1024, "100.0 MiB"),
    ],
)
def test_size_to_string(size: int, expected: str) -> None:
    assert size_to_string(size) == expected
