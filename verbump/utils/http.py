"""
Async JSON client for npm-compatible registries.

:class:`HTTPClient` wraps one ``httpx.AsyncClient`` (HTTP/2, redirects
followed) and adds what registry lookups need: retries for transient
failures and a mapping of HTTP outcomes onto verbump exceptions.
Request concurrency is bounded by the caller, normally
:class:`~verbump.core.data_store.PackumentStore`.
"""

from __future__ import annotations

import httpx
import random
import asyncio
from typing import Any, Dict, Optional

from verbump.utils.logger import get_logger
from verbump.__version__ import __version__
from verbump.exceptions import NetworkError, RegistryError
from verbump.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    PACKUMENT_ACCEPT,
    USER_AGENT_TEMPLATE,
)

logger = get_logger("http")

#: Statuses worth another attempt: rate limiting and server-side failures.
RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})


class HTTPClient:
    """Registry client with retry and backoff.

    Timeouts, connection errors and :data:`RETRY_STATUSES` responses are
    retried up to ``max_retries`` times with exponential backoff; a
    numeric ``Retry-After`` header overrides the computed delay.

    Args:
        timeout: Per-request timeout in seconds.
        max_retries: Retries after the first attempt.
        user_agent: ``User-Agent`` header; defaults to verbump's own.

    Example::

        async with HTTPClient() as client:
            doc = await client.get_json(
                "https://registry.npmjs.org/react", package_name="react"
            )
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        user_agent: Optional[str] = None,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "HTTPClient":
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                http2=True,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent, "Accept": PACKUMENT_ACCEPT},
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get_json(self, url: str, *, package_name: Optional[str] = None) -> Dict[str, Any]:
        """Fetch *url* and return its body as a JSON object.

        Args:
            url: Document URL.
            package_name: Package the document belongs to, for errors.

        Raises:
            RegistryError: The registry answered 404.
            NetworkError: Any other failure, including retries running out
                and bodies that are not a JSON object.
        """
        response = await self._send(url)
        status = response.status_code

        if status == 404:
            what = f"Package '{package_name}'" if package_name else "Resource"
            raise RegistryError(
                f"{what} not found on registry",
                package_name=package_name,
                url=url,
                status_code=status,
            )
        if status >= 400:
            raise NetworkError(
                f"HTTP {status} from registry",
                url=url,
                status_code=status,
                response_body=response.text,
            )

        try:
            data = response.json()
        except ValueError as exc:
            raise NetworkError(
                "Invalid JSON in registry response",
                url=url,
                response_body=response.text,
            ) from exc
        if not isinstance(data, dict):
            raise NetworkError(
                "Expected a JSON object from registry",
                url=url,
                response_body=response.text,
            )
        return data

    async def _send(self, url: str) -> httpx.Response:
        """GET *url*, retrying transient failures.

        Returns the last response once it is final or retries are spent.
        """
        client = self._ensure_client()
        attempt = 0

        while True:
            try:
                response = await client.get(url)
            except httpx.TransportError as exc:
                if attempt >= self.max_retries:
                    raise NetworkError(
                        f"Request failed after {attempt + 1} attempts: {exc}",
                        url=url,
                    ) from exc
                reason = type(exc).__name__
                delay = self._backoff(attempt)
            else:
                if response.status_code not in RETRY_STATUSES or attempt >= self.max_retries:
                    return response
                reason = f"HTTP {response.status_code}"
                delay = self._backoff(attempt, response.headers.get("Retry-After"))

            attempt += 1
            logger.warning(
                "%s for %s, retry %d/%d in %.1fs",
                reason,
                url,
                attempt,
                self.max_retries,
                delay,
            )
            await asyncio.sleep(delay)

    @staticmethod
    def _backoff(attempt: int, retry_after: Optional[str] = None) -> float:
        if retry_after is not None and retry_after.isdigit():
            return float(retry_after)
        return 2**attempt + random.uniform(0.0, 0.3)
