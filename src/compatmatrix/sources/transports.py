from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Iterator, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen


class Transport(ABC):
    """Abstract transport that yields the raw bytes of one document."""

    @abstractmethod
    def chunks(self) -> Iterator[bytes]:
        pass

    @property
    @abstractmethod
    def label(self) -> str:
        pass


class FsFileTransport(Transport):
    def __init__(self, path: str, *, chunk_size: int = 65536):
        self.path = path
        self.chunk_size = chunk_size

    @property
    def label(self) -> str:
        return self.path

    def chunks(self) -> Iterator[bytes]:
        with open(self.path, "rb") as f:
            while True:
                chunk = f.read(self.chunk_size)
                if not chunk:
                    break
                yield chunk


class UrlTransport(Transport):
    def __init__(self, url: str, headers: Optional[Dict[str, str]] = None, chunk_size: int = 64 * 1024):
        self.url = url
        self.headers = dict(headers or {})
        self.chunk_size = chunk_size

    @property
    def label(self) -> str:
        return self.url

    def chunks(self) -> Iterator[bytes]:
        req = Request(self.url, headers=self.headers)

        try:
            resp = urlopen(req)
        except (URLError, HTTPError) as e:
            raise RuntimeError(f"failed to fetch {self.url}: {e}") from e

        with resp:
            while True:
                chunk = resp.read(self.chunk_size)
                if not chunk:
                    break
                yield chunk


def transport_for(source: str, headers: Optional[Dict[str, str]] = None) -> Transport:
    """Pick a URL transport for http(s) sources, the filesystem otherwise."""
    scheme = urlparse(source).scheme.lower()
    if scheme in {"http", "https"}:
        return UrlTransport(source, headers=headers)
    return FsFileTransport(source)
