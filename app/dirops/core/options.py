"""Traversal options file I/O.

This module provides functions for loading and saving default
TraversalOptions in TOML format with validation using Pydantic models.
"""

import os
import tomllib
from datetime import datetime
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import tomli_w
from pydantic import ValidationError

from dirops.core.paths import get_options_path
from dirops.models.criteria import SelectionCriteria, TraversalOptions


class OptionsError(Exception):
    """Base exception for options file errors."""


class OptionsNotFoundError(OptionsError):
    """Raised when the options file is not found."""


class OptionsParseError(OptionsError):
    """Raised when the options file cannot be parsed."""


class OptionsValidationError(OptionsError):
    """Raised when the options file content is invalid."""


def load_options(path: Path | None = None) -> TraversalOptions:
    """Load and validate traversal options from a TOML file.

    Args:
        path: Path to the options file. If None, uses the default path.

    Returns:
        Validated TraversalOptions object.

    Raises:
        OptionsNotFoundError: If the options file doesn't exist.
        OptionsParseError: If the TOML syntax is invalid.
        OptionsValidationError: If the content doesn't match the schema.
    """
    options_path = path or get_options_path()

    if not options_path.exists():
        raise OptionsNotFoundError(f"Options file not found: {options_path}")

    try:
        with open(options_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise OptionsParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise OptionsError(f"Failed to read options: {e}") from e

    try:
        return TraversalOptions.model_validate(data)
    except ValidationError as e:
        raise OptionsValidationError(f"Invalid options content: {e}") from e


def save_options(options: TraversalOptions, path: Path | None = None) -> Path:
    """Save traversal options to a TOML file.

    The file is written atomically by first writing to a temporary file
    in the same directory and then using os.replace() for atomic rename.

    Args:
        options: The TraversalOptions object to save.
        path: Path to save the options. If None, uses the default path.

    Returns:
        Path where the options were saved.

    Raises:
        OptionsError: If the file cannot be written.
    """
    options_path = path or get_options_path()
    options_path.parent.mkdir(parents=True, exist_ok=True)

    data = _options_to_dict(options)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=options_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(options_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise OptionsError(f"Failed to write options: {e}") from e

    return options_path


def options_exists(path: Path | None = None) -> bool:
    """Check if an options file exists.

    Args:
        path: Path to check. If None, uses the default path.

    Returns:
        True if the options file exists, False otherwise.
    """
    options_path = path or get_options_path()
    return options_path.exists()


def _selection_to_dict(selection: SelectionCriteria) -> dict[str, Any]:
    # TOML has no null, so inactive criteria are left out
    result: dict[str, Any] = {
        "name_patterns": list(selection.name_patterns),
        "combine_mode": selection.combine_mode.value,
    }
    for key in ("older_than", "newer_than"):
        moment: datetime | None = getattr(selection, key)
        if moment is not None:
            result[key] = moment
    if selection.permission_mask is not None:
        result["permission_mask"] = selection.permission_mask
    if selection.regex:
        result["regex"] = selection.regex
    return result


def _options_to_dict(options: TraversalOptions) -> dict[str, Any]:
    """Convert TraversalOptions to a dictionary suitable for TOML serialization.

    Args:
        options: The TraversalOptions object to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    return {
        "skip_top_level_directory": options.skip_top_level_directory,
        "scan_sub_directories": options.scan_sub_directories,
        "selection": _selection_to_dict(options.selection),
        "file_types": {
            "regular": options.file_types.regular,
            "symlink": options.file_types.symlink,
            "other": options.file_types.other,
        },
    }
