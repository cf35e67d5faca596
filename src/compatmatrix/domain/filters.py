from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class FilterKind(str, Enum):
    NONE = "none"
    UNIQUE = "unique"
    BETTER = "better"


@dataclass(frozen=True)
class NoFilter:
    kind = FilterKind.NONE


@dataclass(frozen=True)
class UniqueFilter:
    """Features supported on ``platform`` and on no other exporter."""

    platform: str
    kind = FilterKind.UNIQUE


@dataclass(frozen=True)
class BetterFilter:
    """Features where ``platform_a`` outranks ``platform_b``."""

    platform_a: str
    platform_b: str
    kind = FilterKind.BETTER


FilterDescriptor = Union[NoFilter, UniqueFilter, BetterFilter]

NO_FILTER = NoFilter()


class FilterSpecError(ValueError):
    """Raised when a textual filter specification cannot be parsed."""


def parse_filter(text: str | None) -> FilterDescriptor:
    """Parse ``none``, ``unique:<id>`` or ``better:<a>:<b>``."""
    if text is None:
        return NO_FILTER
    raw = text.strip()
    if not raw or raw.lower() == "none":
        return NO_FILTER
    head, _, rest = raw.partition(":")
    head = head.strip().lower()
    parts = [p.strip() for p in rest.split(":")] if rest else []
    if head == FilterKind.UNIQUE.value:
        if len(parts) != 1 or not parts[0]:
            raise FilterSpecError(f"unique filter expects 'unique:<exporter>', got {text!r}")
        return UniqueFilter(platform=parts[0])
    if head == FilterKind.BETTER.value:
        if len(parts) != 2 or not all(parts):
            raise FilterSpecError(f"better filter expects 'better:<a>:<b>', got {text!r}")
        return BetterFilter(platform_a=parts[0], platform_b=parts[1])
    raise FilterSpecError(
        f"unsupported filter {text!r}; expected none, unique:<id> or better:<a>:<b>"
    )


def format_filter(descriptor: FilterDescriptor) -> str:
    if isinstance(descriptor, UniqueFilter):
        return f"unique:{descriptor.platform}"
    if isinstance(descriptor, BetterFilter):
        return f"better:{descriptor.platform_a}:{descriptor.platform_b}"
    return "none"
