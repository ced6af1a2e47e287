from __future__ import annotations

import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Protocol

from loguru import logger

from demosamples.extractors import ContentExtractor
from demosamples.models import (
    DemoMetadataRecord,
    PackageReference,
    RepositoryDescriptor,
)
from demosamples.parsers import extract_nuget_packages, extract_version
from demosamples.readme import extract_readme

DEMO_PREFIX = "Nancy.Demo"
README_PATH = "readme"


class RepositoryLister(Protocol):
    def list_user_repos(self, username: str) -> list[dict]: ...


class NugetAvailability(Protocol):
    def is_available(self, repository_name: str) -> bool: ...


def is_demo(repo: RepositoryDescriptor) -> bool:
    """Demo repositories follow the ``Nancy.Demo.<Project>`` naming convention."""
    return repo.name.lower().startswith(DEMO_PREFIX.lower()) and not repo.fork


class DemoModelFactory:
    """Build demo metadata records from a GitHub user's repositories."""

    def __init__(
        self,
        client: RepositoryLister,
        extractor: ContentExtractor,
        nuget_checker: NugetAvailability,
        *,
        strict_validation: bool = False,
        concurrency: int = 1,
        keep_language: bool = False,
    ) -> None:
        self.client = client
        self.extractor = extractor
        self.nuget_checker = nuget_checker
        self.strict_validation = strict_validation
        self.concurrency = max(1, concurrency)
        self.keep_language = keep_language

    def retrieve(self, username: str) -> list[DemoMetadataRecord]:
        """Return one record per non-fork ``Nancy.Demo*`` repository of ``username``.

        Any fetch failure or malformed listing entry aborts the whole call.
        """
        raw_repos = self.client.list_user_repos(username)
        repos = [RepositoryDescriptor.from_github(raw) for raw in raw_repos]
        demos = [repo for repo in repos if is_demo(repo)]
        logger.info(
            "{} of {} repos for {} are demos", len(demos), len(repos), username
        )

        records = self._build_all(demos)
        return self._valid(records)

    # ------------------------------------------------------------------

    def _build_all(self, demos: list[RepositoryDescriptor]) -> list[DemoMetadataRecord]:
        if self.concurrency == 1 or len(demos) < 2:
            return [self._build(repo) for repo in demos]

        pool = ThreadPoolExecutor(max_workers=self.concurrency)
        try:
            records = list(pool.map(self._build, demos))
        except BaseException:
            pool.shutdown(wait=True, cancel_futures=True)
            raise
        pool.shutdown(wait=True)
        return records

    def _build(self, repo: RepositoryDescriptor) -> DemoMetadataRecord:
        owner = repo.owner_login
        record = DemoMetadataRecord(
            id=str(uuid.uuid4()),
            name=repo.name,
            created_at=repo.created_at,
            description=repo.description,
            author=owner,
            gravatar=repo.owner_avatar_url,
            has_nuget=self.nuget_checker.is_available(repo.name),
            indexed_at=datetime.now(timezone.utc),
            last_commit=repo.updated_at,
            url=repo.html_url,
            packages=tuple(self._packages(owner, repo.name)),
            readme=self._readme(owner, repo.name),
            version=self._version(owner, repo.name),
        )
        logger.info(
            "Indexed {} (version={!r}, {} packages, nuget={})",
            repo.name, record.version, len(record.packages), record.has_nuget,
        )
        return record

    def _packages(self, owner: str, name: str) -> list[PackageReference]:
        path = f"contents/src/{name}/packages.config"
        return self.extractor.extract(owner, name, path, extract_nuget_packages)

    def _readme(self, owner: str, name: str) -> str:
        return self.extractor.extract(
            owner,
            name,
            README_PATH,
            lambda content: extract_readme(content, keep_language=self.keep_language),
        )

    def _version(self, owner: str, name: str) -> str:
        path = f"contents/src/{name}/Properties/AssemblyInfo.cs"
        return self.extractor.extract(owner, name, path, extract_version)

    def _valid(self, records: list[DemoMetadataRecord]) -> list[DemoMetadataRecord]:
        if not self.strict_validation:
            return records

        valid: list[DemoMetadataRecord] = []
        for record in records:
            if record.is_complete():
                valid.append(record)
            else:
                logger.warning("Dropping incomplete demo {}", record.name)
        return valid
