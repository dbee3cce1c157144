"""I/O utilities for writing test files.

All functions create parent directories automatically if they don't exist.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def write_yaml(
    path: Path,
    data: Any,
    *,
    sort_keys: bool = True,
    default_flow_style: bool = False,
) -> Path:
    """Write data to a YAML file, creating parent directories if needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump(data, sort_keys=sort_keys, default_flow_style=default_flow_style),
        encoding="utf-8",
    )
    return path


def write_text(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


__all__ = ["write_text", "write_yaml"]
