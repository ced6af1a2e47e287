from __future__ import annotations

import base64
import time
from types import TracebackType

import httpx
from loguru import logger

_MAX_RETRIES = 4
_BASE_DELAY = 1.0
_RATE_LIMIT_STATUS = (403, 429)


class GitHubClient:
    def __init__(
        self,
        token: str = "",
        *,
        base_url: str = "https://api.github.com",
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=30,
            transport=transport,
        )

    # -- context manager ---------------------------------------------------

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    # -- public API ---------------------------------------------------------

    def list_user_repos(self, username: str) -> list[dict]:
        """Fetch the first page of public repositories owned by ``username``."""
        resp = self._client.get(
            f"/users/{username}/repos", params={"per_page": 100}
        )
        resp.raise_for_status()

        data = resp.json()
        if not isinstance(data, list):
            raise ValueError(
                f"Expected a list of repositories for {username}, got {type(data).__name__}"
            )
        logger.info("Fetched {} repos for {}", len(data), username)
        return data

    def get_file_content(
        self, owner: str, repository: str, relative_path: str
    ) -> str | None:
        """Fetch and decode a file below ``/repos/{owner}/{repository}/``.

        ``relative_path`` is taken as-is, so both ``readme`` and
        ``contents/<path>`` work. Returns ``None`` when the file does not exist.
        """
        url = f"/repos/{owner}/{repository}/{relative_path}"
        for attempt in range(_MAX_RETRIES + 1):
            resp = self._client.get(url)
            if resp.status_code == 404:
                return None
            if resp.status_code in _RATE_LIMIT_STATUS and attempt < _MAX_RETRIES:
                delay = _BASE_DELAY * (2 ** attempt)
                logger.warning(
                    "GitHub rate-limited ({}), retrying in {:.1f}s…",
                    resp.status_code, delay,
                )
                time.sleep(delay)
                continue
            resp.raise_for_status()
            return self._decode(resp.json(), url)
        return None

    def close(self) -> None:
        self._client.close()

    # ------------------------------------------------------------------

    @staticmethod
    def _decode(payload: object, url: str) -> str | None:
        if not isinstance(payload, dict) or "content" not in payload:
            logger.debug("{} is not a file, treating as empty", url)
            return None
        if payload.get("encoding", "base64") != "base64":
            return payload["content"] or None
        return base64.b64decode(payload["content"]).decode("utf-8", errors="replace")
