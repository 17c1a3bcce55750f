"""Core protocols for infrastructure dependencies."""

from iiifauth.core.protocols.fetcher import FetchResponse, ResourceFetcher

__all__ = ["FetchResponse", "ResourceFetcher"]
