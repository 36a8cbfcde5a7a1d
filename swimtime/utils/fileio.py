"""File IO helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd
import yaml


def ensure_dir(path: Path) -> Path:
    """Ensure that a directory exists."""

    path.mkdir(parents=True, exist_ok=True)
    return path


def write_parquet(df: pd.DataFrame, path: Path) -> None:
    """Write a dataframe to Parquet."""

    ensure_dir(path.parent)
    df.to_parquet(path, index=False)


def write_csv(df: pd.DataFrame, path: Path) -> None:
    """Write a dataframe to CSV."""

    ensure_dir(path.parent)
    df.to_csv(path, index=False)


def read_yaml(path: Path) -> Any:
    """Load a YAML document, returning ``None`` for an empty file."""

    with Path(path).open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)


__all__ = ["ensure_dir", "write_parquet", "write_csv", "read_yaml"]
