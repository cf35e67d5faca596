import pytest

from compatmatrix.domain.filters import (
    NO_FILTER,
    BetterFilter,
    FilterKind,
    FilterSpecError,
    UniqueFilter,
    format_filter,
    parse_filter,
)


@pytest.mark.parametrize("text", [None, "", "  ", "none", "NONE"])
def test_parse_filter_none(text) -> None:
    assert parse_filter(text) == NO_FILTER
    assert parse_filter(text).kind is FilterKind.NONE


def test_parse_filter_unique_and_better() -> None:
    assert parse_filter("unique:web") == UniqueFilter(platform="web")
    assert parse_filter("better: ios : android") == BetterFilter(platform_a="ios", platform_b="android")


@pytest.mark.parametrize("text", ["unique", "unique:", "better:a", "better:a:", "worse:a:b"])
def test_parse_filter_rejects_malformed(text) -> None:
    with pytest.raises(FilterSpecError):
        parse_filter(text)


def test_format_filter_matches_parse() -> None:
    for text in ("none", "unique:web", "better:ios:android"):
        assert format_filter(parse_filter(text)) == text
