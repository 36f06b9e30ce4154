"""
Bitbucket Server API Client

Handles authentication and communication with the review server REST API.
Provides methods for change listing, per-file diffs, the activity feed,
and comment and task creation.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..models.review import ReviewRef


logger = logging.getLogger(__name__)


class BitbucketAPIError(Exception):
    """Transport or deserialization failure talking to the review server"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class PayloadError(BitbucketAPIError):
    """Response decoded but did not have the expected shape"""


class BitbucketClient:
    """
    Bitbucket Server REST client.

    Every request is issued synchronously on one session and awaited before
    the next one starts. Failures are raised as BitbucketAPIError and never
    retried unless `max_retries` is set.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout_seconds: float = 30,
        max_retries: int = 0,
    ):
        """
        Initialize Bitbucket client.

        Args:
            base_url: REST API root, e.g. https://host/rest/api/latest
            token: Personal access token (optional for anonymous servers)
            timeout_seconds: Per-request timeout
            max_retries: Retries for idempotent requests on 5xx responses
        """
        if not base_url:
            raise ValueError("Bitbucket base URL is required")

        self.token = token
        self.base_url = base_url.rstrip('/')
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create requests session with retry strategy and authentication."""
        session = requests.Session()

        if self.max_retries > 0:
            # POST is not in Retry's default allowed methods, so task creation is never replayed
            retry_strategy = Retry(
                total=self.max_retries,
                backoff_factor=1,
                status_forcelist=[500, 502, 503, 504],
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            session.mount("http://", adapter)
            session.mount("https://", adapter)

        session.headers.update({
            'Accept': 'application/json',
            'Content-Type': 'application/json',
            'User-Agent': 'PR-Analyser/1.0',
        })
        if self.token:
            session.headers['Authorization'] = f'Bearer {self.token}'

        return session

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make request to the review server.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            BitbucketAPIError: For transport errors and non-2xx responses
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout_seconds)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {method} {url}: {e}")
            raise BitbucketAPIError(f"Request failed: {str(e)}")

        if not response.ok:
            error_data = self._decode(response, strict=False)
            raise BitbucketAPIError(
                f"Bitbucket API error: {response.status_code} - {self._error_message(error_data)}",
                status_code=response.status_code,
                response_data=error_data
            )

        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    def _decode(self, response: requests.Response, strict: bool = True) -> Dict[str, Any]:
        """Decode a JSON body; an undecodable body is a transport failure when strict."""
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            if strict:
                raise BitbucketAPIError(
                    f"Invalid JSON from review server: {e}",
                    status_code=response.status_code
                )
            return {}

    def _error_message(self, error_data: Dict) -> str:
        errors = error_data.get('errors') if isinstance(error_data, dict) else None
        if errors:
            return '; '.join(e.get('message', 'Unknown error') for e in errors)
        return 'Unknown error'

    def _get_json(self, endpoint: str, **kwargs) -> Dict[str, Any]:
        response = self._make_request('GET', endpoint, **kwargs)
        return self._decode(response)

    def get_changes_page(self, ref: ReviewRef, start: int = 0, limit: int = 500) -> Dict[str, Any]:
        """
        Get one page of files changed in a pull request.

        Args:
            ref: Pull request reference
            start: Page start offset
            limit: Page size

        Returns:
            Raw page data with `values`, `isLastPage` and `nextPageStart`
        """
        logger.debug(f"Fetching changes for {ref} (start={start})")
        return self._get_json(f'{ref.path}/changes', params={'start': start, 'limit': limit})

    def get_file_diff(self, ref: ReviewRef, file_path: str) -> Dict[str, Any]:
        """
        Get the structured diff of one file.

        Args:
            ref: Pull request reference
            file_path: Path exactly as returned by the changes listing

        Returns:
            Raw diff data with nested diffs/hunks/segments/lines
        """
        logger.debug(f"Fetching diff for {ref}: {file_path}")
        return self._get_json(f"{ref.path}/diff/{quote(file_path.lstrip('/'), safe='/')}")

    def get_activities(self, ref: ReviewRef, limit: int = 500) -> List[Dict[str, Any]]:
        """
        Get the pull request activity feed.

        Args:
            ref: Pull request reference
            limit: Maximum number of activities to fetch

        Returns:
            List of raw activity records
        """
        logger.debug(f"Fetching activities for {ref} (limit={limit})")
        data = self._get_json(f'{ref.path}/activities', params={'limit': limit})
        if not isinstance(data, dict):
            raise PayloadError("Unexpected activities payload: expected a JSON object", response_data=data)
        return data.get('values', [])

    def create_comment(self, ref: ReviewRef, text: str) -> None:
        """Post a general comment on the pull request."""
        logger.info(f"Creating comment on {ref}")
        self._make_request('POST', f'{ref.path}/comments', json={'text': text})

    def create_task(self, ref: ReviewRef, comment_id: int, text: str, state: str = 'OPEN') -> None:
        """
        Create one task anchored to a comment.

        Args:
            ref: Pull request reference
            comment_id: Anchor comment id
            text: Task text
            state: Initial task state
        """
        logger.debug(f"Creating task on comment {comment_id}: {text}")
        self._make_request('POST', '/tasks', json={
            'anchor': {
                'id': comment_id,
                'type': 'COMMENT',
            },
            'pullRequestId': ref.pr_id,
            'text': text,
            'state': state,
        })
