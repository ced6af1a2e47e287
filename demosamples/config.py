from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

_TRUTHY = {"1", "true", "yes", "on"}


def _flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


@dataclass
class Config:
    github_token: str = ""
    github_username: str = "NancyFx"
    github_api_url: str = "https://api.github.com"
    nuget_api_url: str = "https://api.nuget.org"
    strict_validation: bool = False
    fetch_concurrency: int = 4
    readme_language_hints: bool = False

    @classmethod
    def from_env(cls) -> Config:
        load_dotenv()

        return cls(
            github_token=os.environ.get("GITHUB_TOKEN", ""),
            github_username=os.environ.get("GITHUB_USERNAME", "NancyFx"),
            github_api_url=os.environ.get(
                "GITHUB_API_URL", "https://api.github.com"
            ),
            nuget_api_url=os.environ.get("NUGET_API_URL", "https://api.nuget.org"),
            strict_validation=_flag("STRICT_VALIDATION"),
            fetch_concurrency=int(os.environ.get("FETCH_CONCURRENCY", "4")),
            readme_language_hints=_flag("README_LANGUAGE_HINTS"),
        )
