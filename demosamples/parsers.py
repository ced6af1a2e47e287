from __future__ import annotations

import re

from demosamples.models import PackageReference

# <package id="Nancy.Hosting.Aspnet" version="0.23.0" targetFramework="net40" />
# Both attributes must sit inside the same element but may be split over lines.
NUGET_PACKAGE_PATTERN = re.compile(
    r'\bid="(?P<name>Nancy[^"]*)"[^<>]*?\bversion="(?P<version>[^"]+)"'
)

# [assembly: AssemblyVersion("0.23.0.0")]
ASSEMBLY_VERSION_PATTERN = re.compile(r'AssemblyVersion\("(?P<version>[0-9.]*)"\)')


def extract_nuget_packages(content: str) -> list[PackageReference]:
    """Return every Nancy package referenced by a ``packages.config``, in file order."""
    if not content or not content.strip():
        return []

    return [
        PackageReference(name=match.group("name"), version=match.group("version"))
        for match in NUGET_PACKAGE_PATTERN.finditer(content)
    ]


def extract_version(content: str) -> str:
    """Return the first ``AssemblyVersion`` found in an ``AssemblyInfo.cs``, or ``""``."""
    if not content or not content.strip():
        return ""

    match = ASSEMBLY_VERSION_PATTERN.search(content)
    return match.group("version") if match else ""
