import pytest

from proompt.exceptions import InvalidSizeFormatError
from proompt.sizes import GIB, KIB, MIB, format_size, parse_size


@pytest.mark.unit
@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("512", 512),
        ("0", 0),
        ("7B", 7),
        ("1KB", KIB),
        ("1kb", KIB),
        (" 2MB ", 2 * MIB),
        ("2mB", 2 * MIB),
        ("3GB", 3 * GIB),
        ("10Gb", 10 * GIB),
    ],
)
def test_parse_size_accepts_units_case_insensitively(text: str, expected: int) -> None:
    assert parse_size(text) == expected


@pytest.mark.unit
@pytest.mark.parametrize("text", ["1.5MB", "abc", "10TB", "MB", "", "-1KB", "5 MB", "+5"])
def test_parse_size_rejects_malformed_sizes(text: str) -> None:
    with pytest.raises(InvalidSizeFormatError) as exc_info:
        parse_size(text)

    assert exc_info.value.value == text.strip().upper()
    assert str(exc_info.value) == f"Invalid file size format: {text.strip().upper()}"


@pytest.mark.unit
def test_parse_size_does_not_treat_megabytes_as_bytes() -> None:
    assert parse_size("5MB") == 5 * MIB


@pytest.mark.unit
@pytest.mark.parametrize(
    ("size", "expected"),
    [
        (0, "0B"),
        (1023, "1023B"),
        (1024, "1.0KB"),
        (1536, "1.5KB"),
        (2048, "2.0KB"),
        (MIB, "1.0MB"),
        (MIB + MIB // 2, "1.5MB"),
        (GIB, "1.0GB"),
        (5 * GIB, "5.0GB"),
    ],
)
def test_format_size_picks_largest_binary_unit(size: int, expected: str) -> None:
    assert format_size(size) == expected


@pytest.mark.unit
def test_format_size_unit_never_shrinks_as_size_grows() -> None:
    order = ["B", "KB", "MB", "GB"]

    def unit(size: int) -> int:
        text = format_size(size)
        return max(i for i, suffix in enumerate(order) if text.endswith(suffix))

    sizes = [0, 1, 1023, 1024, 5000, MIB - 1, MIB, GIB - 1, GIB, 3 * GIB]
    units = [unit(s) for s in sizes]

    assert units == sorted(units)
