"""npm registry access.

:class:`NpmRegistryClient` is the default fetcher for
:class:`~verbump.core.data_store.PackumentStore`: an async callable that
returns the full packument document for a package name. Anything with
the same shape (a local mirror, a fixture loader in tests) can be used
instead.
"""

from __future__ import annotations

from typing import Any, Dict
from urllib.parse import quote

from verbump.utils.http import HTTPClient
from verbump.utils.logger import get_logger
from verbump.constants import NPM_REGISTRY

logger = get_logger("registry")


def encode_package_name(name: str) -> str:
    """Encode a package name for use in a registry URL path.

    Examples:
        >>> encode_package_name("@types/node")
        '@types%2Fnode'
        >>> encode_package_name("react")
        'react'
    """
    if name.startswith("@"):
        return "@" + quote(name[1:], safe="")
    return quote(name, safe="")


class NpmRegistryClient:
    """Fetches raw packuments from an npm-compatible registry.

    Args:
        http_client: Open :class:`HTTPClient` (owns the connection pool).
        registry_url: Registry base URL, without trailing slash.
    """

    def __init__(self, http_client: HTTPClient, registry_url: str = NPM_REGISTRY) -> None:
        self.http_client = http_client
        self.registry_url = registry_url.rstrip("/")

    def packument_url(self, name: str) -> str:
        return f"{self.registry_url}/{encode_package_name(name)}"

    async def __call__(self, name: str) -> Dict[str, Any]:
        """Return the packument for *name*.

        Raises:
            RegistryError: The package does not exist on the registry.
            NetworkError: The request failed or returned malformed JSON.
        """
        url = self.packument_url(name)
        logger.debug("GET %s", url)
        return await self.http_client.get_json(url, package_name=name)
