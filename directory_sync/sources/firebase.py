"""
Firebase Realtime Database source
=================================

Reads one node of the database through its REST interface
(``GET {base_url}/{path}.json``) and turns every child into a record.
Transport failures are retried with exponential backoff; everything else
surfaces as :class:`RemoteFetchError`.
"""

from __future__ import annotations

import time
from typing import Any, Callable, List, Mapping, Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from directory_sync.core.errors import RemoteFetchError
from directory_sync.models.school import SchoolRecord
from directory_sync.utils.logger import get_logger

log = get_logger(__name__)

RecordFactory = Callable[[Optional[str], Mapping[str, Any]], Any]


class FirebaseRestSource:
    def __init__(
        self,
        base_url: str,
        path: str = "schools",
        *,
        record_factory: RecordFactory = SchoolRecord.from_snapshot,
        auth_token: Optional[str] = None,
        timeout: float = 15.0,
        max_retries: int = 2,
        backoff_seconds: float = 0.5,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not base_url:
            raise ValueError("base_url is required")
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.base_url = base_url.rstrip("/")
        self.path = path.strip("/")
        self.record_factory = record_factory
        self.auth_token = auth_token
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout), follow_redirects=True)

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.path}.json"

    async def __aenter__(self) -> "FirebaseRestSource":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def _get(self) -> httpx.Response:
        params = {"auth": self.auth_token} if self.auth_token else None
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.backoff_seconds, max=8),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    log.warning(f"Retrying {self.path} fetch (attempt {attempt.retry_state.attempt_number}/{self.max_retries})")
                return await self.client.get(self.url, params=params)
        raise RemoteFetchError("Retry loop exited without a response", source=self.url)

    async def fetch_all(self) -> List[Any]:
        log.info(f"Fetching {self.path} from remote")
        start = time.perf_counter()

        try:
            response = await self._get()
        except httpx.HTTPError as exc:
            raise RemoteFetchError(f"Remote unreachable: {exc}", source=self.url) from exc

        if response.status_code >= 400:
            raise RemoteFetchError(
                f"Remote returned HTTP {response.status_code}",
                source=self.url,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise RemoteFetchError(f"Remote returned invalid JSON: {exc}", source=self.url) from exc

        records = self.parse(payload)
        elapsed = time.perf_counter() - start
        log.info(f"Got {len(records)} {self.path} records in {elapsed:.2f}s")
        return records

    def parse(self, payload: Any) -> List[Any]:
        """Convert a node payload into records, preserving child order."""
        if payload is None:
            return []

        if isinstance(payload, Mapping):
            children = [(str(key), payload[key]) for key in sorted(payload, key=str)]
        elif isinstance(payload, list):
            children = [(str(index), item) for index, item in enumerate(payload)]
        else:
            raise RemoteFetchError(
                f"Unexpected {type(payload).__name__} payload for {self.path}",
                source=self.url,
            )

        records = []
        for key, child in children:
            if child is None:
                continue
            if not isinstance(child, Mapping):
                log.debug(f"Skipping non-object child {key} in {self.path}")
                continue
            records.append(self.record_factory(key, child))
        return records


__all__ = ["FirebaseRestSource"]
