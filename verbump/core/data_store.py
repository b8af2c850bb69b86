"""Memoized, coalescing store for npm registry metadata.

:class:`PackumentStore` fetches each package's packument at most once per
store and keeps the normalized result for the lifetime of the store.
:meth:`PackumentStore.get` never blocks: it returns either the cached
:class:`ResolvedPackument` or a :class:`PendingPackument` handle for the
in-flight fetch. Every caller asking for the same name while the fetch is
running receives the same handle.

Typical usage::

    from verbump.utils.http import HTTPClient
    from verbump.core.registry import NpmRegistryClient
    from verbump.core.data_store import PackumentStore, PendingPackument

    async with HTTPClient() as client:
        store = PackumentStore(NpmRegistryClient(client))

        result = store.get("react")
        if isinstance(result, PendingPackument):
            result.add_done_callback(lambda handle: refresh())
        else:
            print(result.latest)

        packument = await store.fetch("react")   # waits when pending

A failed fetch is not cached: consumers of the handle observe the error
and the next :meth:`~PackumentStore.get` for that name starts a new
fetch. The store is bound to a single asyncio event loop and is not
thread-safe.
"""

from __future__ import annotations

import asyncio
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Generator,
    Iterable,
    Mapping,
    MutableMapping,
    Optional,
    Union,
)

from verbump.utils.logger import get_logger
from verbump.constants import DEFAULT_CONCURRENT_LIMIT
from verbump.models.packument import ResolvedPackument, ResolvedPackumentVersion

logger = get_logger("data_store")

__all__ = [
    "PackumentFetcher",
    "PackumentStore",
    "PendingPackument",
    "normalize_packument",
]

#: Async callable returning the raw registry document for a package name.
PackumentFetcher = Callable[[str], Awaitable[Mapping[str, Any]]]


# ---------------------------------------------------------------------------
# Pending handle
# ---------------------------------------------------------------------------


class PendingPackument:
    """Handle for a packument fetch that has not finished yet.

    The handle is awaitable and supports completion callbacks. Awaiting it
    never cancels the underlying fetch, so a consumer that stops caring
    does not affect other consumers.

    Args:
        name: Package name being fetched.
        future: Task or future that resolves to the packument.
    """

    __slots__ = ("name", "_future")

    def __init__(self, name: str, future: "asyncio.Future[ResolvedPackument]") -> None:
        self.name = name
        self._future = future
        # Mark failures as retrieved; consumers still see them via result()
        future.add_done_callback(_retrieve_exception)

    def done(self) -> bool:
        """Return True once the fetch succeeded or failed."""
        return self._future.done()

    def result(self) -> ResolvedPackument:
        """Return the packument, re-raising the fetch error if it failed.

        Raises:
            asyncio.InvalidStateError: The fetch is still running.
        """
        return self._future.result()

    def exception(self) -> Optional[BaseException]:
        """Return the fetch error, or ``None`` if it succeeded.

        Raises:
            asyncio.InvalidStateError: The fetch is still running.
        """
        return self._future.exception()

    def add_done_callback(self, callback: Callable[["PendingPackument"], None]) -> None:
        """Call *callback* with this handle once the fetch completes.

        Runs on the next event loop iteration if already complete.
        """
        self._future.add_done_callback(lambda _future: callback(self))

    def __await__(self) -> Generator[Any, None, ResolvedPackument]:
        return asyncio.shield(self._future).__await__()

    def __repr__(self) -> str:
        state = "done" if self.done() else "pending"
        return f"PendingPackument(name={self.name!r}, state={state})"


def _retrieve_exception(future: "asyncio.Future[Any]") -> None:
    if not future.cancelled():
        future.exception()


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class PackumentStore:
    """Process-lifetime cache of normalized packuments keyed by name.

    Guarantees at most one in-flight fetch per name. Resolved entries are
    never evicted or refreshed. A :class:`asyncio.Semaphore` bounds how
    many distinct names are fetched at once.

    Args:
        fetcher: Async callable returning the raw packument for a name
            (see :class:`~verbump.core.registry.NpmRegistryClient`).
        storage: Mapping used for resolved entries. Defaults to a new
            ``dict``; pass a shared mapping to reuse results.
        concurrent_limit: Maximum number of fetches running at once.

    Example::

        store = PackumentStore(fetcher, concurrent_limit=5)
        await store.prefetch(["react", "react-dom", "typescript"])
        store.get("react")   # ResolvedPackument, returned synchronously
    """

    def __init__(
        self,
        fetcher: PackumentFetcher,
        *,
        storage: Optional[MutableMapping[str, ResolvedPackument]] = None,
        concurrent_limit: int = DEFAULT_CONCURRENT_LIMIT,
    ) -> None:
        self._fetcher = fetcher
        self._storage: MutableMapping[str, ResolvedPackument] = (
            storage if storage is not None else {}
        )
        self._pending: Dict[str, PendingPackument] = {}
        self._semaphore = asyncio.Semaphore(concurrent_limit)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get(self, name: str) -> Union[ResolvedPackument, PendingPackument]:
        """Return the cached packument for *name* or a pending handle.

        The first call for a name schedules the fetch on the running event
        loop. Calls made while it runs return the same handle.

        Raises:
            RuntimeError: A fetch is needed but no event loop is running.
        """
        cached = self._storage.get(name)
        if cached is not None:
            return cached

        pending = self._pending.get(name)
        if pending is not None:
            return pending

        task = asyncio.get_running_loop().create_task(self._load(name))
        pending = PendingPackument(name, task)
        self._pending[name] = pending
        return pending

    async def fetch(self, name: str) -> ResolvedPackument:
        """Return the packument for *name*, waiting for the fetch if needed.

        Raises:
            Exception: Whatever the fetcher raised for this name.
        """
        result = self.get(name)
        if isinstance(result, PendingPackument):
            return await result
        return result

    async def prefetch(self, names: Iterable[str]) -> Dict[str, BaseException]:
        """Warm the cache for several names concurrently.

        One failing name does not stop the others.

        Returns:
            Failed names mapped to their error; empty when all succeeded.
        """
        unique = list(dict.fromkeys(names))
        results = await asyncio.gather(
            *(self.fetch(name) for name in unique),
            return_exceptions=True,
        )
        return {
            name: result
            for name, result in zip(unique, results)
            if isinstance(result, BaseException)
        }

    def get_cached(self, name: str) -> Optional[ResolvedPackument]:
        """Return the resolved packument for *name* without fetching."""
        return self._storage.get(name)

    def is_pending(self, name: str) -> bool:
        return name in self._pending

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _load(self, name: str) -> ResolvedPackument:
        try:
            async with self._semaphore:
                logger.debug("Fetching package info for %s", name)
                raw = await self._fetcher(name)
            packument = normalize_packument(name, raw)
            self._storage[name] = packument
            logger.debug(
                "Fetched package info for %s (%d versions)",
                name,
                len(packument.versions),
            )
            return packument
        finally:
            self._pending.pop(name, None)


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize_packument(name: str, raw: Mapping[str, Any]) -> ResolvedPackument:
    """Reduce a raw registry document to a :class:`ResolvedPackument`.

    - Versions without a publish timestamp in ``time`` are dropped.
    - Each dist-tag name is attached to the version it points at; when
      several tags share a version the last one listed wins. Tags that
      point at a dropped or unknown version are kept in ``dist_tags``
      only.
    - ``has_provenance`` is set when ``dist.attestations`` is present.
    - ``deprecated`` carries the deprecation message, if any.

    Args:
        name: Package name the document belongs to.
        raw: Registry document with ``versions``, ``time`` and
            ``dist-tags`` keys.
    """
    raw_versions: Mapping[str, Any] = raw.get("versions") or {}
    published: Mapping[str, Any] = raw.get("time") or {}
    dist_tags: Dict[str, str] = dict(raw.get("dist-tags") or {})

    tag_for_version: Dict[str, str] = {}
    for tag, version in dist_tags.items():
        tag_for_version[version] = tag

    versions: Dict[str, ResolvedPackumentVersion] = {}
    for version, meta in raw_versions.items():
        if not published.get(version):
            continue

        meta = meta or {}
        dist = meta.get("dist") or {}
        deprecated = meta.get("deprecated")

        versions[version] = ResolvedPackumentVersion(
            version=version,
            dist_tag=tag_for_version.get(version),
            has_provenance=bool(dist.get("attestations")),
            deprecated=deprecated if isinstance(deprecated, str) and deprecated else None,
        )

    return ResolvedPackument(name=name, versions=versions, dist_tags=dist_tags)
