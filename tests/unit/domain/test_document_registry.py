import logging

from compatmatrix.domain.support import SupportStatus
from tests.unit.helpers import make_registry, sample_payload


def test_registry_assigns_ids_in_document_order(registry) -> None:
    features = list(registry.iter_features())

    assert [f.name for f in features] == ["Shadows", "Blur", "Haptics"]
    assert [f.id for f in features] == [0, 1, 2]
    assert [(f.category_id, f.index) for f in features] == [(0, 0), (0, 1), (1, 0)]
    assert registry.feature(2).name == "Haptics"
    assert registry.categories[1].name == "Input"


def test_document_tolerates_missing_fields() -> None:
    registry = make_registry(
        {
            "exporters": [{"id": "a"}],
            "categories": [
                {"name": "Empty"},
                {"features": [{"name": "Bare"}, {"name": "NoStatus", "support": {"a": {}}}]},
                {"name": "Nulls", "features": None},
            ],
        }
    )

    assert registry.exporters[0].name == "a"
    assert registry.exporters[0].icon is None
    assert registry.categories[0].features == ()
    bare = registry.find_feature("Bare")
    assert bare is not None and dict(bare.support) == {}
    assert registry.find_feature("NoStatus").entry_for("a").status is SupportStatus.UNKNOWN


def test_empty_document_gives_empty_registry() -> None:
    registry = make_registry({})

    assert registry.exporters == ()
    assert registry.categories == ()


def test_unrecognised_status_is_unknown_and_logged(caplog) -> None:
    payload = {
        "exporters": [{"id": "a", "name": "A"}],
        "categories": [
            {"name": "C", "features": [{"name": "F", "support": {"a": {"status": "Maybe"}}}]}
        ],
    }

    with caplog.at_level(logging.WARNING):
        registry = make_registry(payload)

    assert registry.find_feature("F").entry_for("a").status is SupportStatus.UNKNOWN
    assert "unrecognised status" in caplog.text


def test_status_parsing_is_case_insensitive() -> None:
    assert SupportStatus.parse(" Supported ") is SupportStatus.SUPPORTED
    assert SupportStatus.parse(None) is SupportStatus.UNKNOWN
    assert SupportStatus.SUPPORTED.rank > SupportStatus.PARTIAL.rank > SupportStatus.UNSUPPORTED.rank
    assert SupportStatus.UNSUPPORTED.rank > SupportStatus.UNKNOWN.rank


def test_github_keeps_absent_distinct_from_blank(registry) -> None:
    shadows = registry.find_feature("Shadows")

    assert shadows.entry_for("web").github == ""
    assert shadows.entry_for("android").github is None
    assert shadows.entry_for("web").has_notes
    assert not registry.find_feature("Haptics").entry_for("ios").has_notes


def test_duplicate_feature_names_resolve_to_first_match(caplog) -> None:
    payload = sample_payload()
    payload["categories"][1]["features"].append(
        {"name": "Shadows", "support": {"android": {"status": "supported"}}}
    )

    with caplog.at_level(logging.WARNING):
        registry = make_registry(payload)

    found = registry.find_feature("Shadows")
    assert found.id == 0
    assert found.category_id == 0
    assert "duplicate feature name 'Shadows'" in caplog.text
    # Both features stay addressable by identity.
    assert registry.feature(3).name == "Shadows"
    assert registry.feature(3).category_id == 1


def test_exporter_lookup(registry) -> None:
    assert registry.exporter("ios").name == "iOS"
    assert registry.exporters[2] is registry.exporter("android")
    assert registry.exporter("missing") is None


def test_exporter_without_id_renders_empty_column(caplog) -> None:
    payload = {
        "exporters": [{"name": "Nameless"}, {"id": None}, {"id": "a", "name": "A"}],
        "categories": [
            {
                "name": "C",
                "features": [
                    {"name": "F", "support": {"a": {"status": "supported"}, "": {"status": "partial"}}}
                ],
            }
        ],
    }

    with caplog.at_level(logging.WARNING):
        registry = make_registry(payload)

    assert [e.id for e in registry.exporters] == ["", "", "a"]
    assert registry.exporters[0].name == "Nameless"
    feature = registry.find_feature("F")
    assert feature.entry_for("") is None
    assert feature.entry_for("a").status is SupportStatus.SUPPORTED
    assert "has no id" in caplog.text


def test_explicit_null_github_is_tracked_but_not_filed() -> None:
    payload = {
        "exporters": [{"id": "a", "name": "A"}],
        "categories": [
            {
                "name": "C",
                "features": [
                    {"name": "Null", "support": {"a": {"status": "partial", "github": None}}},
                    {"name": "Missing", "support": {"a": {"status": "partial"}}},
                ],
            }
        ],
    }

    registry = make_registry(payload)

    assert registry.find_feature("Null").entry_for("a").github == ""
    assert registry.find_feature("Missing").entry_for("a").github is None
