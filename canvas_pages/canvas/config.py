"""Canvas rendering configuration and its YAML loader.

The values here end up in every rendered control (version strings,
display mode, editor type), so they are handed to pages explicitly at
construction time instead of living in module state.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict

import yaml

from .errors import ConfigError
from .models import COLUMN_FACTORS


@dataclass(frozen=True)
class CanvasConfig:
    """Settings used when parsing and rendering canvas markup.

    Attributes:
        data_version: Value of data-sp-canvasdataversion for new controls
        column_display_mode: displayMode written for empty column markers
        text_editor_type: editorType written for text controls
        max_nesting_depth: Div nesting depth at which scanning gives up
        strict_text_content: Raise instead of using empty text when a text
            control has no content holder
        default_column_factor: Width factor for columns created while parsing
    """

    data_version: str = "1.0"
    column_display_mode: int = 2
    text_editor_type: str = "CKEditor"
    max_nesting_depth: int = 1000
    strict_text_content: bool = False
    default_column_factor: int = 12


DEFAULT_CONFIG = CanvasConfig()


class ConfigLoader:
    """Loads CanvasConfig values from YAML files.

    Configuration file structure (every key optional):
        data_version: "1.0"
        column_display_mode: 2
        text_editor_type: "CKEditor"
        max_nesting_depth: 1000
        strict_text_content: false
        default_column_factor: 12
    """

    @classmethod
    def load(cls, config_path: str) -> CanvasConfig:
        """Load and validate a canvas configuration file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            CanvasConfig with file values over the defaults

        Raises:
            ConfigError: If the file is missing, unreadable or invalid
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise ConfigError(f"Configuration file not found at {config_path}")
        except OSError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}")

        if not content.strip():
            return CanvasConfig()

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if config_dict is None:
            return CanvasConfig()

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        return cls.from_dict(config_dict)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> CanvasConfig:
        """Build a CanvasConfig from a plain dictionary.

        Raises:
            ConfigError: On unknown keys or values of the wrong type
        """
        known = {f.name: f for f in fields(CanvasConfig)}
        values = {}
        for key, value in config_dict.items():
            if key not in known:
                raise ConfigError("Unknown setting", config_field=key)
            expected = type(getattr(DEFAULT_CONFIG, key))
            # bool is a subclass of int; keep them apart
            if isinstance(value, bool) != (expected is bool) or not isinstance(value, expected):
                raise ConfigError(
                    f"Expected {expected.__name__}, got {type(value).__name__}",
                    config_field=key,
                )
            values[key] = value

        if values.get('max_nesting_depth', 1) < 1:
            raise ConfigError("Must be a positive integer", config_field='max_nesting_depth')

        factor = values.get('default_column_factor', DEFAULT_CONFIG.default_column_factor)
        if factor not in COLUMN_FACTORS:
            raise ConfigError(
                f"Invalid column factor {factor}", config_field='default_column_factor'
            )

        return CanvasConfig(**values)
