# tasks.py  ── invoke ≥2.2
from invoke import task, Context  # type: ignore
from typing import Optional

import pathlib


BASE_ENV = pathlib.Path(__file__).parent


@task(
    help={
        "k": "Only run tests matching this expression",
        "verbose": "Verbose pytest output",
    }
)
def test(c: Context, k: Optional[str] = None, verbose: bool = False) -> None:
    """Run the test-suite."""
    cmd = "pytest tests"
    if k:
        cmd += f" -k '{k}'"
    if verbose:
        cmd += " -v"
    c.run(cmd, pty=False)


@task(
    help={
        "players": "Players CSV (default: data/raw/players.csv)",
        "teams": "Team records CSV (default: data/raw/team_records.csv)",
        "season": "Season to analyse (default: config.SEASON)",
        "lenient": "Drop teams without a record instead of stopping",
    }
)
def analyze(
    c: Context,
    players: Optional[str] = None,
    teams: Optional[str] = None,
    season: Optional[int] = None,
    lenient: bool = False,
) -> None:
    """Run the full size-vs-wins analysis and print every table."""
    from cfb_size_analysis.analysis import run_full_analysis

    results = run_full_analysis(
        players, teams, season=int(season) if season else None, strict=not lenient
    )
    if results.failed_fits:
        print(f"\n⚠️  {len(results.failed_fits)} model(s) failed: {sorted(results.failed_fits)}")
    print("\n✅ Analysis complete")


@task
def dirs(c: Context) -> None:
    """Create the data/output directory tree."""
    from cfb_size_analysis.config import config

    config.ensure_directories()
    print(f"📁 Data directories ready under {config.DATA_DIR}")
