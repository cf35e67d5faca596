import json
from urllib.error import URLError

import pytest

from compatmatrix.sources import loader as loader_module
from compatmatrix.sources.loader import FAILURE_MESSAGE, LoadFailure, load_registry
from compatmatrix.sources.transports import (
    FsFileTransport,
    Transport,
    UrlTransport,
    transport_for,
)
from tests.unit.helpers import sample_payload


class _BytesTransport(Transport):
    def __init__(self, payload: bytes, chunk: int = 7):
        self.payload = payload
        self.chunk = chunk

    @property
    def label(self) -> str:
        return "memory"

    def chunks(self):
        for i in range(0, len(self.payload), self.chunk):
            yield self.payload[i:i + self.chunk]


def test_load_registry_from_file(write_document) -> None:
    path = write_document(sample_payload())

    registry = load_registry(str(path))

    assert [e.id for e in registry.exporters] == ["web", "ios", "android"]
    assert registry.find_feature("Haptics").id == 2


def test_load_registry_decodes_multibyte_across_chunks() -> None:
    payload = {
        "exporters": [{"id": "x", "name": "Übersicht"}],
        "categories": [{"name": "Größe", "features": []}],
    }
    transport = _BytesTransport(json.dumps(payload, ensure_ascii=False).encode("utf-8"), chunk=3)

    registry = load_registry(transport)

    assert registry.exporters[0].name == "Übersicht"
    assert registry.categories[0].name == "Größe"


@pytest.mark.parametrize(
    "content",
    ["{not json", "[1, 2, 3]", '{"exporters": [{"name": "no id"}]}'],
)
def test_load_failures_are_wrapped(write_document, content) -> None:
    path = write_document(content)

    with pytest.raises(LoadFailure) as excinfo:
        load_registry(str(path))

    assert excinfo.value.source == str(path)
    assert str(excinfo.value).startswith(FAILURE_MESSAGE)


def test_missing_file_is_load_failure(tmp_path) -> None:
    with pytest.raises(LoadFailure):
        load_registry(str(tmp_path / "absent.json"))


def test_url_fetch_errors_are_load_failures(monkeypatch) -> None:
    def _boom(*_args, **_kwargs):
        raise URLError("offline")

    monkeypatch.setattr("compatmatrix.sources.transports.urlopen", _boom)

    with pytest.raises(LoadFailure) as excinfo:
        load_registry("https://example.invalid/data.json")

    assert "offline" in excinfo.value.reason


def test_transport_for_picks_by_scheme(tmp_path) -> None:
    assert isinstance(transport_for("https://example.com/data.json"), UrlTransport)
    assert isinstance(transport_for("http://example.com/data.json"), UrlTransport)
    assert isinstance(transport_for(str(tmp_path / "data.json")), FsFileTransport)


def test_loader_logs_failures(write_document, caplog) -> None:
    path = write_document("{oops")

    with pytest.raises(LoadFailure):
        load_registry(str(path))

    assert FAILURE_MESSAGE in caplog.text
    assert loader_module.logger.name == "compatmatrix.sources.loader"
