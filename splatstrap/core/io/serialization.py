"""
Configuration Serialization & Persistence Utilities.

This module handles the conversion of Pydantic models and Path objects into
YAML, and persists them with an atomic, fsync'd write so that an interrupted
run never leaves a half-written recipe snapshot or dependency manifest.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from ..paths import LOGGER_NAME


# YAML ORCHESTRATION
def save_config_as_yaml(data: Any, yaml_path: Path, indent: int = 4) -> Path:
    """
    Serializes and persists configuration data to a YAML file.

    Args:
        data (Any): The object to save. Supports objects with
            'dump_portable()' or 'model_dump()' methods, or standard dictionaries.
        yaml_path (Path): The destination filesystem path.
        indent (int): YAML block indentation.

    Returns:
        Path: The confirmed path where the YAML was successfully written.

    Raises:
        ValueError: If the data structure cannot be serialized.
        OSError: If a filesystem-level error occurs (permissions, disk full).
    """
    logger = logging.getLogger(LOGGER_NAME)

    # 1. Extraction & Sanitization Phase
    try:
        if hasattr(data, "dump_portable"):
            raw_dict = data.dump_portable()
        elif hasattr(data, "model_dump"):
            raw_dict = data.model_dump(mode="json", exclude_none=True)
        else:
            raw_dict = data

        final_data = _sanitize_for_yaml(raw_dict)

    except (TypeError, ValueError, AttributeError) as e:
        logger.error(f"Serialization failed: object structure is incompatible. Error: {e}")
        raise ValueError(f"Could not serialize configuration object: {e}") from e

    # 2. Persistence Phase (Atomic Write)
    try:
        _persist_yaml_atomic(final_data, yaml_path, indent=indent)
        logger.debug(f"YAML written → {yaml_path}")
        return yaml_path

    except OSError as e:
        logger.error(f"IO Error: Could not write YAML to {yaml_path}. Error: {e}")
        raise


def load_config_from_yaml(yaml_path: Path) -> dict[str, Any]:
    """
    Loads a raw configuration dictionary from a YAML file.

    Args:
        yaml_path (Path): Path to the source YAML file.

    Returns:
        dict[str, Any]: The loaded mapping (empty files yield None).

    Raises:
        FileNotFoundError: If the specified path does not exist.
    """
    if not yaml_path.exists():
        raise FileNotFoundError(f"YAML configuration file not found at: {yaml_path}")

    with open(yaml_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f)  # type: ignore[no-any-return]


def _sanitize_for_yaml(obj: Any) -> Any:
    """
    Recursively converts non-serializable types into YAML-standard formats.

    Specifically handles:

    - Path objects -> converted to strings.
    - Dicts/Lists/Tuples -> processed recursively.
    """
    if isinstance(obj, dict):
        return {k: _sanitize_for_yaml(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_sanitize_for_yaml(i) for i in obj]
    if isinstance(obj, Path):
        return str(obj)
    return obj


def _persist_yaml_atomic(data: Any, path: Path, indent: int = 4) -> None:
    """
    Write to a sibling temp file, fsync it, then rename over the target.

    The rename is atomic on POSIX filesystems, so readers only ever see the
    previous file or the complete new one.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")

    with open(tmp_path, "w", encoding="utf-8") as f:
        yaml.dump(
            data, f, default_flow_style=False, sort_keys=False, indent=indent, allow_unicode=True
        )
        f.flush()
        os.fsync(f.fileno())

    tmp_path.replace(path)
