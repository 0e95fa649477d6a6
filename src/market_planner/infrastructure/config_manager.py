"""Planner Profile Management Module.

Handles listing, loading, and saving of planner configuration profiles.
Enforces the strictly typed PlannerConfig schema.
"""

import json
from pathlib import Path
from typing import List

from ..schemas import PlannerConfig

PROFILE_DIR = Path.cwd() / "profiles"


def _profile_path(filename: str) -> Path:
    """Resolve a profile name, adding the .json suffix when omitted."""
    name = filename if filename.endswith(".json") else f"{filename}.json"
    return PROFILE_DIR / name


def list_profiles() -> List[str]:
    """List all available profile files in the profiles directory.

    Returns:
        List of filenames (e.g., ['default.json', 'town_square.json']).
    """
    if not PROFILE_DIR.exists():
        return []
    return sorted(f.name for f in PROFILE_DIR.glob("*.json"))


def load_config(filename: str) -> PlannerConfig:
    """Load and validate a planner profile from a JSON file.

    Args:
        filename: Name of the file (e.g. 'town_square.json').

    Returns:
        Validated PlannerConfig object.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ValidationError: If JSON doesn't match schema.
    """
    file_path = _profile_path(filename)
    if not file_path.exists():
        raise FileNotFoundError(f"Profile file not found: {file_path}")

    with open(file_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return PlannerConfig(**data)


def save_config(config: PlannerConfig, filename: str) -> None:
    """Save a planner profile to a JSON file.

    Args:
        config: The PlannerConfig object to save.
        filename: Target filename; ".json" is appended if missing.
    """
    PROFILE_DIR.mkdir(parents=True, exist_ok=True)
    file_path = _profile_path(filename)

    with open(file_path, "w", encoding="utf-8") as f:
        f.write(config.model_dump_json(indent=2))
