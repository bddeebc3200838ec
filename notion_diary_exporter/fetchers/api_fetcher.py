"""API fetcher implementation retrieving diary pages and block trees from Notion."""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..models import Block, Page
from ..notion_client import NotionClient
from .base_fetcher import BaseFetcher, BlockTreeFetchError, FetcherError

logger = logging.getLogger('notion_diary_exporter.fetcher.api')


class ApiFetcher(BaseFetcher):
    """Fetches database pages and page bodies via the Notion REST API."""

    def __init__(self, config: Dict[str, Any], logger: Optional[logging.Logger] = None,
                 client: Optional[NotionClient] = None):
        """
        Initialize API fetcher with configuration.

        Args:
            config: Configuration dictionary with notion and advanced settings
            logger: Logger instance (optional)
            client: Pre-built client (optional, built from config otherwise)
        """
        super().__init__(config, logger)
        self.client = client or NotionClient.from_config(config)

    def fetch_pages(self, database_id: str, title_property: str, date_property: str,
                    filter_substring: Optional[str] = None) -> List[Page]:
        """
        Fetch every page of the database, optionally filtered by title.

        Results are requested in ascending date order; callers still sort on
        the normalized date since pages without a date come back in any order.
        """
        query_filter = None
        if filter_substring is not None:
            query_filter = {'property': title_property, 'title': {'contains': filter_substring}}
            logger.info(f"Querying database {database_id} for titles containing '{filter_substring}'")
        else:
            logger.info(f"Querying all pages of database {database_id}")

        sorts = [{'property': date_property, 'direction': 'ascending'}]

        def fetch_page(cursor: Optional[str]) -> Dict[str, Any]:
            return self.client.query_database(
                database_id,
                query_filter=query_filter,
                sorts=sorts,
                start_cursor=cursor,
                page_size=self.page_size
            )

        try:
            results = self._paginate(fetch_page, f"database {database_id}")
        except requests.exceptions.RequestException as e:
            raise FetcherError(f"Failed to query database {database_id}: {str(e)}") from e

        pages = [self._convert_api_page_to_model(item) for item in results]
        logger.info(f"Fetched {len(pages)} pages")
        return pages

    def fetch_block_tree(self, root_id: str) -> List[Block]:
        """
        Fetch the full block tree of a page, flattened in pre-order.

        Uses an explicit stack: children of a block are listed when the block
        is popped and pushed in reverse so they are emitted before the next
        sibling. Any failure aborts the whole tree.

        Raises:
            BlockTreeFetchError: If any listing in the tree fails
        """
        try:
            flattened: List[Block] = []
            stack = list(reversed(self._list_children(root_id)))

            while stack:
                block = stack.pop()
                flattened.append(block)
                if block.has_children:
                    stack.extend(reversed(self._list_children(block.id)))

        except (requests.exceptions.RequestException, FetcherError) as e:
            logger.error(f"Block tree fetch failed for {root_id}: {str(e)}")
            raise BlockTreeFetchError(root_id, str(e)) from e

        logger.debug(f"Fetched {len(flattened)} blocks for {root_id}")
        return flattened

    def _list_children(self, block_id: str) -> List[Block]:
        """List all direct children of a block across every result page."""
        def fetch_page(cursor: Optional[str]) -> Dict[str, Any]:
            return self.client.list_block_children(
                block_id,
                start_cursor=cursor,
                page_size=self.page_size
            )

        results = self._paginate(fetch_page, f"children of {block_id}")
        return [self._convert_api_block_to_model(item) for item in results]

    def _convert_api_page_to_model(self, api_page: Dict[str, Any]) -> Page:
        page = Page.from_api(api_page)
        if not page.properties:
            logger.warning(f"Page {page.id or '<no id>'} has no properties")
        return page

    def _convert_api_block_to_model(self, api_block: Dict[str, Any]) -> Block:
        block = Block.from_api(api_block)
        if block.type not in api_block:
            logger.debug(f"Block {block.id} of type '{block.type}' has no payload")
        return block


__all__ = ['ApiFetcher']
