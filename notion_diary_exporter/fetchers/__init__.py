"""Fetchers package for retrieving Notion database pages and block trees."""

from .base_fetcher import (
    BaseFetcher,
    BlockTreeFetchError,
    FetcherError,
    PaginationError
)
from .api_fetcher import ApiFetcher

__all__ = [
    'BaseFetcher',
    'BlockTreeFetchError',
    'FetcherError',
    'PaginationError',
    'ApiFetcher'
]
