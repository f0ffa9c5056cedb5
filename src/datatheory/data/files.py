"""Loading data rows from files."""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Any

import simdjson
import yaml

from datatheory.data.directives import FileFormat


logger = logging.getLogger(__name__)


def load_csv(csv_path: Path) -> list[dict[str, str]]:
    """Load rows from a CSV file with a header line."""
    with open(csv_path, "r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        return [dict(row) for row in reader]


def load_jsonl(jsonl_path: Path) -> list[Any]:
    """Load rows from a JSONL (JSON Lines) file."""
    rows = []
    with open(jsonl_path, "rb") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            rows.append(simdjson.loads(line))
    return rows


def load_yaml(yaml_path: Path) -> list[Any]:
    """Load rows from a YAML file holding a list of rows or a single row."""
    with open(yaml_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.debug("YAML data file %s is empty", yaml_path)
        return []
    if isinstance(data, list):
        return data
    return [data]


_LOADERS = {
    "csv": load_csv,
    "jsonl": load_jsonl,
    "yaml": load_yaml,
}


def load_rows(path: Path, format: FileFormat) -> list[Any]:
    """Load raw rows from ``path`` using the loader for ``format``."""
    return _LOADERS[format](path)
