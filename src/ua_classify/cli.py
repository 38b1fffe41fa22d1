"""``ua-classify`` command line interface."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from loguru import logger
from rich.console import Console
from rich.table import Table

from .batch import BATCH_STEPS, BatchResult, classify_file
from .classifier import UserAgentClassifier
from .config import Settings, configure_logging
from .environment import FeatureDetector, ProcessEnvironment
from .models import Classification
from .utils.progress import ProgressTracker


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ua-classify",
        description="Classify user-agent strings into browser, OS and device class.",
    )
    parser.add_argument(
        "user_agent",
        nargs="?",
        help="User-agent string (defaults to $HTTP_USER_AGENT)",
    )
    parser.add_argument("--json", action="store_true", help="Print JSON")
    parser.add_argument(
        "--features",
        action="store_true",
        help="Also report capability flags from the environment",
    )
    parser.add_argument(
        "--batch",
        nargs="+",
        type=Path,
        metavar="FILE",
        help="Files with one user agent per line (.bz2 accepted)",
    )
    parser.add_argument("--output", type=Path, help="Batch output TSV")
    parser.add_argument(
        "--summary", action="store_true", help="Print per-family counts after a batch"
    )
    parser.add_argument("--verbose", action="store_true", default=None)
    parser.add_argument("--progress", action="store_true", default=None)
    return parser


def render_classification(
    console: Console, result: Classification, features: dict[str, bool] | None
) -> None:
    table = Table(title="User agent", show_header=False)
    table.add_column("field", style="bold cyan")
    table.add_column("value")
    for key, value in result.as_dict().items():
        table.add_row(key, str(value))
    for key, value in (features or {}).items():
        table.add_row(key, str(value))
    console.print(table)


def render_summary(console: Console, result: BatchResult) -> None:
    table = Table(title=f"{result.rows} user agents")
    table.add_column("browser", style="bold cyan")
    table.add_column("os", style="magenta")
    table.add_column("count", justify="right")
    for browser, os_name, count in result.summary:
        table.add_row(browser, os_name, str(count))
    console.print(table)


def classify_one(args: argparse.Namespace, console: Console) -> int:
    environment = ProcessEnvironment()
    classifier = UserAgentClassifier(args.user_agent, environment=environment)
    features = FeatureDetector(environment).as_dict() if args.features else None

    if args.json:
        payload: dict[str, object] = dict(classifier.result.as_dict())
        if features is not None:
            payload["features"] = features
        print(json.dumps(payload, indent=2))
    else:
        render_classification(console, classifier.result, features)
    return 0


def classify_batch(
    args: argparse.Namespace, settings: Settings, console: Console
) -> int:
    output = args.output or settings.output_dir / "classified.tsv"
    with ProgressTracker(
        total_steps=BATCH_STEPS,
        enabled=settings.progress,
        verbose=settings.verbose,
    ) as tracker:
        result = classify_file(args.batch, output, settings=settings, tracker=tracker)

    logger.success("classified {} user agents -> {}", result.rows, result.output)
    if args.summary:
        render_summary(console, result)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    overrides = {
        name: value
        for name, value in (("verbose", args.verbose), ("progress", args.progress))
        if value is not None
    }
    if overrides:
        settings = replace(settings, **overrides)
    configure_logging(settings.verbose)

    console = Console()
    try:
        if args.batch:
            return classify_batch(args, settings, console)
        return classify_one(args, console)
    except (FileNotFoundError, ValueError, RuntimeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("classification failed: {}", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
