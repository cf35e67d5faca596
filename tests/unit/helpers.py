from __future__ import annotations

from typing import Any

from compatmatrix.config.document import MatrixDocument
from compatmatrix.domain.registry import SupportRegistry


def make_registry(payload: dict[str, Any]) -> SupportRegistry:
    return MatrixDocument.model_validate(payload).to_registry()


def exporters(*ids: str) -> list[dict[str, str]]:
    return [{"id": i, "name": i.upper()} for i in ids]


def two_platform_payload() -> dict[str, Any]:
    """Exporters A and B, one category X with one feature F."""
    return {
        "exporters": [{"id": "a", "name": "A"}, {"id": "b", "name": "B"}],
        "categories": [
            {
                "name": "X",
                "features": [
                    {
                        "name": "F",
                        "support": {
                            "a": {"status": "supported"},
                            "b": {"status": "unsupported"},
                        },
                    }
                ],
            }
        ],
    }


def sample_payload() -> dict[str, Any]:
    return {
        "exporters": [
            {"id": "web", "name": "Web", "icon": "ti ti-world"},
            {"id": "ios", "name": "iOS"},
            {"id": "android", "name": "Android"},
        ],
        "categories": [
            {
                "name": "Rendering",
                "features": [
                    {
                        "name": "Shadows",
                        "support": {
                            "web": {"status": "supported", "notes": "CSS only", "github": ""},
                            "ios": {"status": "partial", "github": "https://github.com/o/r/issues/1"},
                            "android": {"status": "unsupported"},
                        },
                    },
                    {
                        "name": "Blur",
                        "support": {
                            "web": {"status": "supported"},
                            "ios": {"status": "supported"},
                            "android": {"status": "unknown"},
                        },
                    },
                ],
            },
            {
                "name": "Input",
                "features": [
                    {
                        "name": "Haptics",
                        "support": {
                            "ios": {"status": "supported", "notes": "   "},
                            "android": {"status": "partial"},
                        },
                    },
                ],
            },
        ],
    }
