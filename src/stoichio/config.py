"""
Configuration & Path Management
===============================
Central place for resource paths.

The bundled periodic table lives in ``stoichio/data``. It can be replaced
without touching the code by pointing the ``STOICHIO_PERIODIC_TABLE``
environment variable at another CSV file with the same columns.

Exports:
    DATA_PATH (Path): Directory holding the bundled data files.
    DEFAULT_PERIODIC_TABLE_PATH (Path): The bundled periodic table CSV.
"""
from __future__ import annotations

import os
from pathlib import Path

from stoichio.constants import PERIODIC_TABLE_ENV

DATA_PATH: Path = Path(__file__).parent / "data"
DEFAULT_PERIODIC_TABLE_PATH: Path = DATA_PATH / "periodic_table.csv"


def periodic_table_path(override: str | Path | None = None) -> Path:
    """Resolve which periodic table file to load.

    Precedence: explicit ``override``, then the environment variable, then the
    bundled table.
    """
    if override is not None:
        return Path(override)
    from_env = os.environ.get(PERIODIC_TABLE_ENV)
    if from_env:
        return Path(from_env)
    return DEFAULT_PERIODIC_TABLE_PATH
