"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

from ..utils.time import parse_clock

_KNOWN_FIELDS: dict[str, set[str]] = {
    "session": {"start_time", "end_time", "lag_seconds", "symbols"},
    "quotes": {"min_bid", "allowed_modes", "spread_filter", "max_spread_pct"},
    "trades": {"allowed_correction_codes"},
    "nbbo": {"tick_unit", "implied_price_bin_count", "fill_to_close"},
    "exchanges": {"labels"},
}


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_session_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate trading window, lag and symbol universe."""
        errors = []
        clock = {}

        for key in ("start_time", "end_time"):
            if key in params:
                value = params[key]
                try:
                    clock[key] = parse_clock(value)
                except (TypeError, ValueError):
                    errors.append(ValidationError(
                        field=key,
                        message="Must be seconds since midnight or an HH:MM:SS string",
                        value=value
                    ))

        if "start_time" in clock and "end_time" in clock:
            if clock["start_time"] > clock["end_time"]:
                errors.append(ValidationError(
                    field="end_time",
                    message="Must not be earlier than start_time",
                    value=params["end_time"]
                ))

        if "lag_seconds" in params:
            value = params["lag_seconds"]
            if not _is_int(value) or value < 0:
                errors.append(ValidationError(
                    field="lag_seconds",
                    message="Must be a non-negative integer",
                    value=value
                ))

        if "symbols" in params:
            value = params["symbols"]
            if isinstance(value, str) or not isinstance(value, (list, tuple)) \
                    or not all(isinstance(s, str) and s.strip() for s in value):
                errors.append(ValidationError(
                    field="symbols",
                    message="Must be a list of non-empty symbol strings",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_quote_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate quote filter parameters."""
        errors = []

        if "min_bid" in params:
            value = params["min_bid"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="min_bid",
                    message="Must be a non-negative number",
                    value=value
                ))

        if "allowed_modes" in params:
            value = params["allowed_modes"]
            if not isinstance(value, (list, tuple)) or not all(_is_int(m) for m in value):
                errors.append(ValidationError(
                    field="allowed_modes",
                    message="Must be a list of integer mode codes",
                    value=value
                ))

        if "spread_filter" in params:
            value = params["spread_filter"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="spread_filter",
                    message="Must be a boolean",
                    value=value
                ))

        if "max_spread_pct" in params:
            value = params["max_spread_pct"]
            if not _is_number(value) or value <= 0 or value > 1:
                errors.append(ValidationError(
                    field="max_spread_pct",
                    message="Must be a positive number between 0 and 1",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_trade_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate trade filter parameters."""
        errors = []

        if "allowed_correction_codes" in params:
            value = params["allowed_correction_codes"]
            if not isinstance(value, (list, tuple)) or not all(_is_int(c) for c in value):
                errors.append(ValidationError(
                    field="allowed_correction_codes",
                    message="Must be a list of integer correction codes",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_nbbo_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate consolidated quote derivation parameters."""
        errors = []

        if "tick_unit" in params:
            value = params["tick_unit"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="tick_unit",
                    message="Must be a positive number",
                    value=value
                ))

        if "implied_price_bin_count" in params:
            value = params["implied_price_bin_count"]
            if not _is_int(value) or value <= 0:
                errors.append(ValidationError(
                    field="implied_price_bin_count",
                    message="Must be a positive integer",
                    value=value
                ))

        if "fill_to_close" in params:
            value = params["fill_to_close"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="fill_to_close",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_exchange_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate the venue label table."""
        errors = []

        if "labels" in params:
            value = params["labels"]
            if isinstance(value, str) or not isinstance(value, (list, tuple)) \
                    or not value or not all(isinstance(v, str) and v.strip() for v in value):
                errors.append(ValidationError(
                    field="labels",
                    message="Must be a non-empty list of venue labels",
                    value=value
                ))
            elif len({v.strip().upper() for v in value}) != len(value):
                errors.append(ValidationError(
                    field="labels",
                    message="Venue labels must be unique",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        for section, values in config.items():
            if section not in _KNOWN_FIELDS:
                errors.append(ValidationError(
                    field=section,
                    message="Unknown configuration section",
                    value=values
                ))
                continue
            if not isinstance(values, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Section must be a mapping",
                    value=values
                ))
                continue
            for key in values:
                if key not in _KNOWN_FIELDS[section]:
                    errors.append(ValidationError(
                        field=f"{section}.{key}",
                        message="Unknown configuration key",
                        value=values[key]
                    ))

        if errors:
            return errors

        if "session" in config:
            errors.extend(ConfigValidator.validate_session_params(config["session"]))

        if "quotes" in config:
            errors.extend(ConfigValidator.validate_quote_params(config["quotes"]))

        if "trades" in config:
            errors.extend(ConfigValidator.validate_trade_params(config["trades"]))

        if "nbbo" in config:
            errors.extend(ConfigValidator.validate_nbbo_params(config["nbbo"]))

        if "exchanges" in config:
            errors.extend(ConfigValidator.validate_exchange_params(config["exchanges"]))

        return errors
