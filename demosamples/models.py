from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


class DescriptorError(ValueError):
    """Raised when a repository listing entry does not have the expected shape."""


def _parse_timestamp(raw: dict, key: str) -> datetime:
    value = raw.get(key)
    if not isinstance(value, str):
        raise DescriptorError(f"{key!r} is missing or not a string")
    # fromisoformat() only accepts a trailing "Z" from Python 3.11 onwards
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise DescriptorError(f"{key!r} is not an ISO-8601 timestamp: {value!r}") from exc


def _require_str(raw: dict, key: str, *, where: str = "") -> str:
    value = raw.get(key)
    if not isinstance(value, str):
        raise DescriptorError(f"{where}{key!r} is missing or not a string")
    return value


@dataclass(frozen=True)
class RepositoryDescriptor:
    """One entry of a user's repository listing."""

    name: str
    fork: bool
    created_at: datetime
    updated_at: datetime
    description: str | None
    owner_login: str
    owner_avatar_url: str
    html_url: str

    @classmethod
    def from_github(cls, raw: dict) -> RepositoryDescriptor:
        """Decode an item of ``GET /users/{username}/repos``."""
        if not isinstance(raw, dict):
            raise DescriptorError(f"repository entry is not an object: {raw!r}")

        owner = raw.get("owner")
        if not isinstance(owner, dict):
            raise DescriptorError("'owner' is missing or not an object")

        fork = raw.get("fork")
        if not isinstance(fork, bool):
            raise DescriptorError("'fork' is missing or not a boolean")

        description = raw.get("description")
        if description is not None and not isinstance(description, str):
            raise DescriptorError("'description' is not a string")

        return cls(
            name=_require_str(raw, "name"),
            fork=fork,
            created_at=_parse_timestamp(raw, "created_at"),
            updated_at=_parse_timestamp(raw, "updated_at"),
            description=description,
            owner_login=_require_str(owner, "login", where="owner."),
            owner_avatar_url=_require_str(owner, "avatar_url", where="owner."),
            html_url=_require_str(raw, "html_url"),
        )


@dataclass(frozen=True)
class PackageReference:
    name: str
    version: str


@dataclass(frozen=True)
class DemoMetadataRecord:
    """Display-ready metadata for a single demo repository."""

    id: str
    name: str
    created_at: datetime
    description: str | None
    author: str
    gravatar: str
    has_nuget: bool
    indexed_at: datetime
    last_commit: datetime
    url: str
    packages: tuple[PackageReference, ...] = field(default_factory=tuple)
    readme: str = ""
    version: str = ""

    def is_complete(self) -> bool:
        """True when readme, version and description all carry text."""
        return all(
            value and value.strip()
            for value in (self.readme, self.version, self.description)
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
            "description": self.description,
            "author": self.author,
            "gravatar": self.gravatar,
            "has_nuget": self.has_nuget,
            "indexed_at": self.indexed_at.isoformat(),
            "last_commit": self.last_commit.isoformat(),
            "url": self.url,
            "packages": [
                {"name": p.name, "version": p.version} for p in self.packages
            ],
            "readme": self.readme,
            "version": self.version,
        }
