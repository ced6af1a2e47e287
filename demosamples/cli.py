from __future__ import annotations

import argparse
import json
import logging
import sys

import httpx
from loguru import logger

from demosamples.config import Config
from demosamples.extractors import ContentExtractor
from demosamples.factory import DemoModelFactory
from demosamples.github import GitHubClient
from demosamples.models import DescriptorError
from demosamples.nuget import NugetChecker


def cmd_index(
    config: Config,
    *,
    username: str | None = None,
    output: str | None = None,
) -> int:
    """Index the user's demo repositories and write them out as JSON."""
    username = username or config.github_username

    with GitHubClient(
        config.github_token, base_url=config.github_api_url
    ) as github, NugetChecker(base_url=config.nuget_api_url) as nuget:
        factory = DemoModelFactory(
            github,
            ContentExtractor(github),
            nuget,
            strict_validation=config.strict_validation,
            concurrency=config.fetch_concurrency,
            keep_language=config.readme_language_hints,
        )
        logger.info("Retrieving demos for {}…", username)
        try:
            records = factory.retrieve(username)
        except httpx.HTTPError as exc:
            logger.error("Request to {} failed: {}", username, exc)
            return 1
        except DescriptorError as exc:
            logger.error("Malformed repository listing for {}: {}", username, exc)
            return 1

    payload = json.dumps([record.to_dict() for record in records], indent=2)
    if output:
        with open(output, "w", encoding="utf-8") as fh:
            fh.write(payload + "\n")
        logger.info("Wrote {} demos to {}", len(records), output)
    else:
        print(payload)
    return 0


class _InterceptHandler(logging.Handler):
    """Route stdlib logging (httpx, httpcore, etc.) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1
        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _setup_logging(verbose: bool = False) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
    )

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)
    for name in ("httpx", "httpcore", "MARKDOWN"):
        logging.getLogger(name).setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="demosamples",
        description="Index Nancy demo repositories on GitHub as JSON metadata",
    )
    parser.add_argument(
        "--username",
        default=None,
        help="GitHub account to scan (default: env GITHUB_USERNAME or NancyFx)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Drop demos without a README, version or description",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Repositories fetched in parallel (default: env FETCH_CONCURRENCY or 4)",
    )
    parser.add_argument(
        "--language-hints",
        action="store_true",
        help="Keep fenced code block languages as language-* classes",
    )
    parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write JSON to this file instead of stdout",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    _setup_logging(args.verbose)

    config = Config.from_env()
    if args.strict:
        config.strict_validation = True
    if args.concurrency is not None:
        config.fetch_concurrency = args.concurrency
    if args.language_hints:
        config.readme_language_hints = True

    sys.exit(cmd_index(config, username=args.username, output=args.output))
