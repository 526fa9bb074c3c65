"""File utility functions for reading and writing JSON files."""

import json
from pathlib import Path
from typing import Any, Optional
from loguru import logger


def read_json(file_path: str | Path) -> Any:
    """Read and parse a JSON file.

    Args:
        file_path: Path to the JSON file (can be string or Path object)

    Returns:
        The decoded JSON value

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the path is not a file or does not contain valid JSON
    """
    path = Path(file_path)

    if not path.exists():
        logger.error(f"File not found: {path}")
        raise FileNotFoundError(f"JSON file not found: {path}")

    if not path.is_file():
        logger.error(f"Path is not a file: {path}")
        raise ValueError(f"Path is not a file: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in {path}: {e}")
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    logger.debug(f"Read JSON file: {path}")
    return data


def read_json_safe(file_path: str | Path) -> Optional[Any]:
    """Read a JSON file, returning None instead of raising.

    Args:
        file_path: Path to the JSON file

    Returns:
        The decoded JSON value, or None if the file is missing or unreadable
    """
    try:
        return read_json(file_path)
    except (OSError, ValueError) as e:
        logger.debug(f"Could not read JSON file {file_path}: {e}")
        return None


def write_json(file_path: str | Path, data: Any) -> None:
    """Write data to a JSON file with two-space indentation, creating parent directories."""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")

    logger.debug(f"Wrote JSON file: {path}")
