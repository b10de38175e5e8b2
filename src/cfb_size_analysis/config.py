"""
Configuration module for the CFB Size Analysis package.
Contains all constants, paths, and position rules.
"""
from pathlib import Path
from typing import Dict, List, Tuple


class Config:
    """Main configuration class for the CFB Size Analysis package."""

    # Base paths, relative to the project root so they work locally and in CI
    _CONFIG_DIR = Path(__file__).parent.parent.parent  # Go up to project root
    PROJECT_ROOT = _CONFIG_DIR.resolve()

    DATA_DIR = PROJECT_ROOT / "data"
    RAW_DATA_DIR = DATA_DIR / "raw"
    PROCESSED_DATA_DIR = DATA_DIR / "processed"
    OUTPUT_DIR = PROJECT_ROOT / "output"

    # Raw data files (written by the acquisition script)
    PLAYERS_FILE = RAW_DATA_DIR / "players.csv"
    TEAM_RECORDS_FILE = RAW_DATA_DIR / "team_records.csv"

    # Season analysed when the records file holds several
    SEASON: int | None = 2023

    # Required input columns
    PLAYER_COLUMNS: List[str] = ["name", "team", "position", "height", "weight"]
    TEAM_COLUMNS: List[str] = ["team", "season", "games", "wins", "losses"]

    # ─── Position rules ───────────────────────────────────────────
    EXCLUDED_POSITIONS: Tuple[str, ...] = ("ATH", "PR")
    POSITION_GROUPS: Dict[str, str] = {
        "C": "OL", "G": "OL", "OG": "OL", "OT": "OL",
        "DE": "DL", "DT": "DL", "NT": "DL",
        "CB": "DB", "S": "DB",
    }
    FULLBACK_CODE = "FB"
    # Triple-option academies line their fullbacks up as running backs
    TRIPLE_OPTION_TEAMS: Tuple[str, ...] = ("Army", "Navy")
    POSITION_SET: Tuple[str, ...] = (
        "QB", "RB", "WR", "TE", "OL", "DL", "LB", "DB", "K", "P", "LS",
    )

    # ─── Metrics ──────────────────────────────────────────────────
    BMI_CONSTANT = 703
    METRICS: List[str] = ["height", "weight", "bmi"]

    # ─── Modelling parameters ─────────────────────────────────────
    TUKEY_ALPHA = 0.05
    SIGNIFICANCE_ALPHA = 0.05
    GLM_MAX_ITER = 100

    # Example scenario: pounds added to the average player at each position
    SCENARIO_WEIGHT_DELTAS: Dict[str, float] = {
        "weight_OL": 10.0,
        "weight_DL": 10.0,
        "weight_LB": 10.0,
    }

    @classmethod
    def ensure_directories(cls):
        """Create all required directories if they don't exist."""
        for dir_path in [cls.RAW_DATA_DIR, cls.PROCESSED_DATA_DIR, cls.OUTPUT_DIR]:
            dir_path.mkdir(parents=True, exist_ok=True)


# Create global config instance
config = Config()


if __name__ == "__main__":
    print("CFB Size Analysis Configuration")
    print("=" * 40)
    print(f"Data directory: {config.DATA_DIR}")
    print(f"Season: {config.SEASON}")
    print(f"Position groups: {sorted(set(config.POSITION_GROUPS.values()))}")
    print(f"Triple-option teams: {config.TRIPLE_OPTION_TEAMS}")

    config.ensure_directories()
    print("******* Configuration loaded and directories created!")
