"""Abstract base fetcher interface and cursor pagination."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

from ..models import Block, Page

MAX_PAGE_SIZE = 100


class FetcherError(Exception):
    """Base exception for fetcher-related errors."""
    pass


class PaginationError(FetcherError):
    """Exception for responses that break the cursor contract."""
    pass


class BlockTreeFetchError(FetcherError):
    """Raised when any listing of a page's block tree fails."""

    def __init__(self, root_id: str, message: str):
        super().__init__(f"Failed to fetch block tree of {root_id}: {message}")
        self.root_id = root_id


class BaseFetcher(ABC):
    """Abstract base class for Notion content fetchers."""

    def __init__(self, config: Dict[str, Any], logger: Optional[logging.Logger] = None):
        """
        Initialize base fetcher with configuration and logger.

        Args:
            config: Configuration dictionary
            logger: Logger instance (optional, uses module logger if not provided)
        """
        self.config = config
        self.logger = logger or logging.getLogger('notion_diary_exporter.fetcher')

        page_size = int((config.get('advanced') or {}).get('page_size', MAX_PAGE_SIZE))
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"advanced.page_size must be between 1 and {MAX_PAGE_SIZE}")
        self.page_size = page_size

    @abstractmethod
    def fetch_pages(self, database_id: str, title_property: str, date_property: str,
                    filter_substring: Optional[str] = None) -> List[Page]:
        """
        Fetch every page of a database.

        Args:
            database_id: Notion database ID
            title_property: Title property used for filtering
            date_property: Date property used for sorting
            filter_substring: Only pages whose title contains this text (None = all)

        Returns:
            List of Page objects
        """
        pass

    @abstractmethod
    def fetch_block_tree(self, root_id: str) -> List[Block]:
        """
        Fetch all descendant blocks of a page or block in pre-order.

        Args:
            root_id: Page or block ID

        Returns:
            Flattened list of blocks, each parent followed by its descendants
        """
        pass

    def _paginate(self, fetch_page: Callable[[Optional[str]], Dict[str, Any]],
                  description: str) -> List[Dict[str, Any]]:
        """
        Follow a cursor chain until ``has_more`` is false.

        Args:
            fetch_page: Callable taking a start cursor (None for the first
                request) and returning a raw response
            description: What is being listed, for log and error messages

        Returns:
            All results in response order

        Raises:
            PaginationError: If a response is malformed or repeats a cursor
        """
        results: List[Dict[str, Any]] = []
        seen_cursors = set()
        cursor: Optional[str] = None
        requests_made = 0

        while True:
            response = fetch_page(cursor)
            requests_made += 1

            if not isinstance(response, dict) or not isinstance(response.get('results'), list):
                raise PaginationError(f"Malformed response while listing {description}")

            results.extend(response['results'])

            if not response.get('has_more'):
                break

            cursor = response.get('next_cursor')
            if not cursor:
                raise PaginationError(
                    f"Response for {description} has has_more=true but no next_cursor"
                )
            if cursor in seen_cursors:
                raise PaginationError(f"Cursor {cursor} repeated while listing {description}")
            seen_cursors.add(cursor)

            self.logger.debug(f"Fetched {len(results)} results for {description} so far...")

        self.logger.debug(f"Listed {len(results)} results for {description} in {requests_made} request(s)")
        return results


__all__ = [
    'MAX_PAGE_SIZE',
    'FetcherError',
    'PaginationError',
    'BlockTreeFetchError',
    'BaseFetcher'
]
