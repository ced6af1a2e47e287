from __future__ import annotations

from typing import Callable, Protocol, TypeVar

from loguru import logger

T = TypeVar("T")


class FileContentSource(Protocol):
    def get_file_content(
        self, owner: str, repository: str, relative_path: str
    ) -> str | None: ...


class ContentExtractor:
    """Fetch a file from a repository and hand its text to a transform.

    Missing files reach the transform as an empty string; deciding what an
    absent file means is left to the transform.
    """

    def __init__(self, source: FileContentSource) -> None:
        self.source = source

    def extract(
        self,
        owner: str,
        repository: str,
        relative_path: str,
        transform: Callable[[str], T],
    ) -> T:
        content = self.source.get_file_content(owner, repository, relative_path)
        if content is None:
            logger.debug("No content at {}/{}/{}", owner, repository, relative_path)
            content = ""
        return transform(content)
