"""HTTP client for the game record and leaderboard service.

Writes are fire-and-forget from the simulation's point of view: ``submit``
hands the request to a worker thread and every failure ends up in the log,
never in the game loop.
"""

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, List, Optional

import httpx

from raceservices.models import GameRecord, LeaderboardEntry

logger = logging.getLogger(__name__)


class RecordServiceClient:
    """Client for appending finished games and querying the leaderboard.

    Features:
    - Connection pooling through a shared ``httpx.Client``
    - Retries with exponential backoff on timeouts and connection errors
    - Non-blocking ``submit`` for use from the game-over handler
    """

    DEFAULT_TIMEOUT = 5.0  # Request timeout in seconds
    MAX_RETRIES = 2
    RETRY_DELAY = 0.5  # Initial retry delay (doubles each retry)

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = MAX_RETRIES,
        retry_delay: float = RETRY_DELAY,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Root URL of the record service
            timeout: Request timeout in seconds
            max_retries: Retry attempts on timeouts and connection errors
            retry_delay: Initial backoff delay in seconds
            transport: Optional transport (tests pass ``httpx.MockTransport``)
        """
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._client = httpx.Client(
            base_url=base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
            follow_redirects=True,
        )
        self._executor: Optional[ThreadPoolExecutor] = None

    def __enter__(self) -> "RecordServiceClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self, wait: bool = True) -> None:
        """Finish pending submissions and release connections."""
        if self._executor is not None:
            self._executor.shutdown(wait=wait)
            self._executor = None
        self._client.close()
        logger.debug("RecordServiceClient closed")

    def _request(self, method: str, path: str, retries: int = 0, **kwargs: Any) -> Optional[httpx.Response]:
        """Make a request with retry logic.

        Returns:
            Response if successful, None if the request failed
        """
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
            return response

        except httpx.HTTPStatusError as e:
            logger.error(
                "HTTP %d error for %s %s: %s",
                e.response.status_code,
                method,
                path,
                e,
            )
            return None

        except (httpx.TimeoutException, httpx.ConnectError) as e:
            if retries < self._max_retries:
                delay = self._retry_delay * (2 ** retries)
                logger.warning(
                    "Request failed (%s), retrying in %.1fs... (attempt %d/%d)",
                    type(e).__name__,
                    delay,
                    retries + 1,
                    self._max_retries,
                )
                time.sleep(delay)
                return self._request(method, path, retries=retries + 1, **kwargs)
            logger.error(
                "Request failed after %d retries: %s %s - %s",
                self._max_retries,
                method,
                path,
                e,
            )
            return None

        except httpx.HTTPError as e:
            logger.error("Unexpected error in request to %s: %s", path, e, exc_info=True)
            return None

    def post_record(self, record: GameRecord) -> bool:
        """Append a finished game. Returns True on success."""
        response = self._request("POST", "/api/game/save", json=record.model_dump(mode="json"))
        if response is None:
            return False
        logger.info(f"Saved game record for {record.username} ({record.distance:.0f} m)")
        return True

    def fetch_leaderboard(self, limit: int = 10) -> List[LeaderboardEntry]:
        """Query the top entries, best distance first. Empty on failure."""
        response = self._request("GET", "/api/leaderboard", params={"limit": limit})
        if response is None:
            return []
        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Malformed leaderboard response: {e}")
            return []
        entries = payload.get("entries", payload) if isinstance(payload, dict) else payload
        if not isinstance(entries, list):
            logger.error("Malformed leaderboard response: expected a list of entries")
            return []
        return [LeaderboardEntry.model_validate(entry) for entry in entries]

    def submit(self, record: GameRecord) -> Future:
        """Post a record on a worker thread without blocking the caller."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="record-client")
        return self._executor.submit(self.post_record, record)
