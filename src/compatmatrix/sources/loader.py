from __future__ import annotations

import codecs
import json
import logging
from typing import Iterable, Union

from pydantic import ValidationError

from compatmatrix.config.document import MatrixDocument
from compatmatrix.domain.registry import SupportRegistry
from compatmatrix.sources.transports import Transport, transport_for

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "Failed to load compatibility data"


class LoadFailure(RuntimeError):
    """Raised when the compatibility document cannot be fetched or parsed."""

    def __init__(self, source: str, reason: str):
        super().__init__(f"{FAILURE_MESSAGE} from {source}: {reason}")
        self.source = source
        self.reason = reason


def _read_all_text(chunks: Iterable[bytes], encoding: str) -> str:
    decoder = codecs.getincrementaldecoder(encoding)()
    parts: list[str] = []
    for chunk in chunks:
        parts.append(decoder.decode(chunk))
    parts.append(decoder.decode(b"", final=True))
    return "".join(parts)


def load_registry(
    source: Union[str, Transport],
    *,
    encoding: str = "utf-8",
) -> SupportRegistry:
    """Fetch, decode and freeze the compatibility document.

    Every failure on the way (I/O, network, decoding, JSON, schema) is
    reported as a single ``LoadFailure``; nothing is partially loaded.
    """
    transport = transport_for(source) if isinstance(source, str) else source
    label = transport.label
    try:
        text = _read_all_text(transport.chunks(), encoding)
        payload = json.loads(text)
        if not isinstance(payload, dict):
            raise TypeError(
                f"top-level JSON must be an object, got {type(payload).__name__}"
            )
        document = MatrixDocument.model_validate(payload)
    except (OSError, RuntimeError, UnicodeDecodeError, ValueError, TypeError, ValidationError) as exc:
        logger.error("%s from %s: %s", FAILURE_MESSAGE, label, exc)
        raise LoadFailure(label, str(exc)) from exc

    registry = document.to_registry()
    logger.info(
        "loaded %d exporters and %d features from %s",
        len(registry.exporters),
        sum(len(c.features) for c in registry.categories),
        label,
    )
    return registry
