"""Configuration support: XDG paths, the options file and the CLI theme."""

from dirops.core.options import (
    OptionsError,
    OptionsNotFoundError,
    OptionsParseError,
    OptionsValidationError,
    load_options,
    options_exists,
    save_options,
)
from dirops.core.paths import ensure_config_dir, get_config_dir, get_options_path

__all__ = [
    "OptionsError",
    "OptionsNotFoundError",
    "OptionsParseError",
    "OptionsValidationError",
    "ensure_config_dir",
    "get_config_dir",
    "get_options_path",
    "load_options",
    "options_exists",
    "save_options",
]
