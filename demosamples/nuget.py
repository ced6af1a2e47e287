from __future__ import annotations

from types import TracebackType

import httpx
from loguru import logger


class NugetChecker:
    """Tell whether a package named after a repository is published on NuGet."""

    def __init__(
        self,
        *,
        base_url: str = "https://api.nuget.org",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(base_url=base_url, timeout=30, transport=transport)

    def __enter__(self) -> NugetChecker:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def is_available(self, repository_name: str) -> bool:
        package_id = repository_name.lower()
        resp = self._client.get(f"/v3-flatcontainer/{package_id}/index.json")
        if resp.status_code == 404:
            logger.debug("No NuGet package for {}", repository_name)
            return False
        resp.raise_for_status()

        versions = resp.json().get("versions") or []
        logger.debug("{} has {} NuGet versions", repository_name, len(versions))
        return bool(versions)

    def close(self) -> None:
        self._client.close()
