"""Resource fetcher adapters."""

from iiifauth.adapters.fetcher.fake import FakeResourceFetcher
from iiifauth.adapters.fetcher.httpx_fetcher import HttpxResourceFetcher, load_document

__all__ = ["HttpxResourceFetcher", "FakeResourceFetcher", "load_document"]
