#!/usr/bin/env python3
from __future__ import annotations

import json
import sys
from pathlib import Path

import typer

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from bilinear_compare import CompareError, compare_png_files  # noqa: E402
from bilinear_compare.config import (  # noqa: E402
    DEFAULT_THRESHOLDS,
    load_compare_thresholds,
    load_thresholds,
    parse_threshold,
)
from bilinear_compare.errors import E1004_CONFIG_INVALID, ConfigError  # noqa: E402

app = typer.Typer(add_completion=False, help="Compare a rendered image against a reference.")


@app.command()
def main(
    reference: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Path to the reference image.",
    ),
    result: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Path to the rendered result image.",
    ),
    threshold: str | None = typer.Option(
        None,
        "--threshold",
        "-t",
        help="Per-channel tolerance as r,g,b,a; cannot be combined with --profile.",
    ),
    thresholds: Path = typer.Option(
        DEFAULT_THRESHOLDS,
        "--thresholds",
        "-c",
        exists=True,
        dir_okay=False,
        readable=True,
        help="Path to the compare thresholds YAML.",
    ),
    profile: str | None = typer.Option(
        None,
        "--profile",
        "-p",
        help="Named threshold profile from the thresholds YAML.",
    ),
    mask: Path | None = typer.Option(
        None,
        "--mask",
        "-m",
        dir_okay=False,
        help="Optional path to write the error mask PNG.",
    ),
    report: Path | None = typer.Option(
        None,
        "--report",
        "-o",
        dir_okay=False,
        help="Optional path to write the JSON report.",
    ),
) -> None:
    """Compare two images with bilinear tolerance and emit a JSON report."""
    try:
        if threshold is not None and profile is not None:
            raise ConfigError(
                code=E1004_CONFIG_INVALID,
                message="--threshold and --profile are mutually exclusive.",
                hint="Pass either an explicit --threshold or a named --profile.",
            )
        if threshold is not None:
            color_threshold = parse_threshold(threshold)
        else:
            config = load_compare_thresholds(load_thresholds(thresholds), profile)
            color_threshold = config.threshold
        outcome = compare_png_files(reference, result, color_threshold, mask)
    except CompareError as exc:
        typer.echo(f"ERROR {exc.code}: {exc.message}", err=True)
        typer.echo(f"HINT: {exc.hint}", err=True)
        raise typer.Exit(code=2)
    payload = json.dumps(outcome.to_dict(), indent=2, sort_keys=True)
    if report is not None:
        report.write_text(payload)
    typer.echo(payload)
    raise typer.Exit(code=0 if outcome.status == "pass" else 1)


if __name__ == "__main__":
    app(prog_name="compare_images")
