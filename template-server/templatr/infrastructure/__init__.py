"""Infrastructure helpers: HTML document handling and script loaders."""

from .html import parse_document, serialize_document
from .loaders import Fetcher, Reader, RemoteFetcher, read_local_file

__all__ = [
    "Fetcher",
    "Reader",
    "RemoteFetcher",
    "parse_document",
    "read_local_file",
    "serialize_document",
]
