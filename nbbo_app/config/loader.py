"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from ..utils.time import parse_clock
from .defaults import (
    DefaultConfig,
    ExchangeParams,
    NBBOParams,
    QuoteFilterParams,
    SessionParams,
    TradeFilterParams,
    get_default_config,
)
from .validation import ConfigValidator

CONFIG_FILENAME = "nbbo.yaml"

# Sequence-valued fields are stored as tuples so the config stays hashable
_TUPLE_FIELDS = {
    ("session", "symbols"),
    ("quotes", "allowed_modes"),
    ("trades", "allowed_correction_codes"),
    ("exchanges", "labels"),
}


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load run-level overrides from the YAML config file, if present."""
        config_file = self.config_dir / CONFIG_FILENAME

        if not config_file.exists():
            return {}

        with open(config_file) as f:
            file_config = yaml.safe_load(f)

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"{config_file} must contain a mapping, got {type(file_config).__name__}"
            )

        return file_config

    def merge_config(self, overrides: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit run overrides (highest priority)
        2. Config file overrides
        3. Global defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        config = self._deep_merge(config, self.load_file_config())

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def build_run_config(self, overrides: Optional[dict[str, Any]] = None) -> DefaultConfig:
        """
        Merge, validate and materialize the run configuration.

        Raises:
            ConfigurationError: If any parameter fails validation
        """
        config = self.merge_config(overrides)

        errors = ConfigValidator.validate_config(config)
        if errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in errors]
            raise ConfigurationError(
                "Invalid run configuration: " + "; ".join(error_msgs),
                errors=errors
            )

        return config_from_dict(config)

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def config_from_dict(config: dict[str, Any]) -> DefaultConfig:
    """Build a DefaultConfig from an already-validated dictionary."""
    sections = {}
    for section, values in config.items():
        normalized = {}
        for key, value in values.items():
            if (section, key) in _TUPLE_FIELDS:
                value = tuple(value)
            normalized[key] = value
        sections[section] = normalized

    session = dict(sections.get("session", {}))
    for key in ("start_time", "end_time"):
        if key in session:
            session[key] = parse_clock(session[key])
    if "symbols" in session:
        session["symbols"] = tuple(s.strip().upper() for s in session["symbols"])

    return DefaultConfig(
        session=SessionParams(**session),
        quotes=QuoteFilterParams(**sections.get("quotes", {})),
        trades=TradeFilterParams(**sections.get("trades", {})),
        nbbo=NBBOParams(**sections.get("nbbo", {})),
        exchanges=ExchangeParams(**sections.get("exchanges", {})),
    )
