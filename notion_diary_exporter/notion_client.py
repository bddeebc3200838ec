"""Notion REST API client with retry policy, rate limiting and error logging."""

import json
import logging
import time
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger('notion_diary_exporter.client')

DEFAULT_BASE_URL = 'https://api.notion.com/v1'
DEFAULT_API_VERSION = '2022-06-28'
MAX_PAGE_SIZE = 100


class NotionClient:
    """Thin Notion REST client returning one result page per call.

    Pagination is left to the caller: every listing method takes a
    ``start_cursor`` and returns the raw response with ``results``,
    ``has_more`` and ``next_cursor``.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        timeout: int = 30,
        max_retries: int = 3,
        retry_backoff_factor: float = 2.0,
        rate_limit: float = 0.0
    ):
        """
        Initialize Notion client with bearer authentication and retry configuration.

        Args:
            token: Notion integration token
            base_url: API base URL
            api_version: Value of the Notion-Version header
            timeout: HTTP request timeout in seconds
            max_retries: Maximum retry attempts for transient errors
            retry_backoff_factor: Exponential backoff factor
            rate_limit: Minimum seconds between requests (0.0 = no rate limiting)
        """
        if not token:
            raise ValueError("Notion client requires an integration token")

        self.base_url = base_url.rstrip('/') + '/'
        self.api_version = api_version
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_backoff_factor = retry_backoff_factor
        self.rate_limit = rate_limit
        self.last_request_time = 0.0

        self.session = requests.Session()
        self.session.headers.update({
            'Authorization': f'Bearer {token}',
            'Notion-Version': api_version,
            'Content-Type': 'application/json'
        })

        # Database queries are POSTs but read-only, so they are safe to retry
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=retry_backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS", "POST"],
            respect_retry_after_header=True,
            raise_on_status=False
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        logger.debug(f"Client configured for {self.base_url} with timeout={timeout}s, "
                     f"max_retries={max_retries}, backoff_factor={retry_backoff_factor}, "
                     f"rate_limit={rate_limit}s")

    def _enforce_rate_limit(self) -> None:
        """Enforce rate limiting if configured."""
        if self.rate_limit <= 0:
            return

        time_since_last = time.time() - self.last_request_time

        if time_since_last < self.rate_limit:
            sleep_time = self.rate_limit - time_since_last
            logger.debug(f"Rate limiting: sleeping for {sleep_time:.2f}s")
            time.sleep(sleep_time)

    def _make_request(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        """
        Make HTTP request to the Notion API and decode the JSON body.

        Args:
            method: HTTP method (GET, POST)
            endpoint: API path relative to the base URL (e.g., "blocks/<id>/children")
            **kwargs: Additional arguments for requests

        Returns:
            Decoded JSON response

        Raises:
            requests.exceptions.HTTPError: For HTTP errors (after retries)
            requests.exceptions.Timeout: For timeout errors
            requests.exceptions.RequestException: For other request errors
        """
        self._enforce_rate_limit()

        url = urljoin(self.base_url, endpoint.lstrip('/'))
        start_time = time.time()
        logger.debug(f"API Request: {method} {url}")

        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            elapsed = time.time() - start_time
            logger.debug(f"API Response: {response.status_code} {url} ({elapsed:.3f}s)")

            response.raise_for_status()
            return response.json()

        except requests.exceptions.Timeout:
            logger.error(f"Request timeout after {self.timeout}s: {method} {url}")
            raise

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else "unknown"
            logger.error(f"HTTP Error {status_code}: {method} {url}")

            if e.response is not None:
                try:
                    error_data = e.response.json()
                    logger.error(f"Error details: {json.dumps(error_data, indent=2, ensure_ascii=False)}")
                except ValueError:
                    logger.error(f"Error response: {e.response.text[:500]}")

            raise

        except requests.exceptions.RequestException as e:
            logger.error(f"Request error: {method} {url} - {str(e)}")
            raise

        finally:
            self.last_request_time = time.time()

    def query_database(
        self,
        database_id: str,
        query_filter: Optional[Dict[str, Any]] = None,
        sorts: Optional[List[Dict[str, Any]]] = None,
        start_cursor: Optional[str] = None,
        page_size: int = MAX_PAGE_SIZE
    ) -> Dict[str, Any]:
        """
        Fetch one page of database query results.

        Args:
            database_id: Notion database ID
            query_filter: Optional Notion filter object
            sorts: Optional list of Notion sort objects
            start_cursor: Cursor returned by the previous call
            page_size: Number of results (at most 100)

        Returns:
            Response dict with ``results``, ``has_more`` and ``next_cursor``
        """
        payload: Dict[str, Any] = {'page_size': min(page_size, MAX_PAGE_SIZE)}
        if query_filter:
            payload['filter'] = query_filter
        if sorts:
            payload['sorts'] = sorts
        if start_cursor:
            payload['start_cursor'] = start_cursor

        return self._make_request('POST', f'databases/{database_id}/query', json=payload)

    def list_block_children(
        self,
        block_id: str,
        start_cursor: Optional[str] = None,
        page_size: int = MAX_PAGE_SIZE
    ) -> Dict[str, Any]:
        """
        Fetch one page of a block's (or page's) direct children.

        Args:
            block_id: Parent block or page ID
            start_cursor: Cursor returned by the previous call
            page_size: Number of results (at most 100)

        Returns:
            Response dict with ``results``, ``has_more`` and ``next_cursor``
        """
        params: Dict[str, Any] = {'page_size': min(page_size, MAX_PAGE_SIZE)}
        if start_cursor:
            params['start_cursor'] = start_cursor

        return self._make_request('GET', f'blocks/{block_id}/children', params=params)

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'NotionClient':
        """
        Initialize Notion client from configuration dictionary.

        Args:
            config: Configuration dictionary with notion and advanced settings

        Returns:
            NotionClient instance
        """
        notion_config = config.get('notion', {}) or {}
        advanced_config = config.get('advanced', {}) or {}

        return cls(
            token=notion_config.get('token'),
            base_url=notion_config.get('base_url', DEFAULT_BASE_URL),
            api_version=notion_config.get('api_version', DEFAULT_API_VERSION),
            timeout=advanced_config.get('request_timeout', 30),
            max_retries=advanced_config.get('max_retries', 3),
            retry_backoff_factor=advanced_config.get('retry_backoff_factor', 2.0),
            rate_limit=advanced_config.get('rate_limit', 0.0)
        )


__all__ = ['NotionClient', 'DEFAULT_BASE_URL', 'DEFAULT_API_VERSION', 'MAX_PAGE_SIZE']
