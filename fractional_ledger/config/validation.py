"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

STORAGE_BACKENDS = ("memory", "sqlite")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_storage_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate storage parameters."""
        errors = []

        if "backend" in params:
            value = params["backend"]
            if value not in STORAGE_BACKENDS:
                errors.append(ValidationError(
                    field="backend",
                    message=f"Must be one of {', '.join(STORAGE_BACKENDS)}",
                    value=value
                ))

        if "db_path" in params:
            value = params["db_path"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="db_path",
                    message="Must be a non-empty string",
                    value=value
                ))

        if "timeout_seconds" in params:
            value = params["timeout_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
                errors.append(ValidationError(
                    field="level",
                    message=f"Must be one of {', '.join(LOG_LEVELS)}",
                    value=value
                ))

        for flag in ("format_json", "include_timestamp", "include_caller"):
            if flag in params and not isinstance(params[flag], bool):
                errors.append(ValidationError(
                    field=flag,
                    message="Must be a boolean",
                    value=params[flag]
                ))

        return errors

    @staticmethod
    def validate_accounting_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate accounting parameters."""
        errors = []

        if "conservation_tolerance" in params:
            value = params["conservation_tolerance"]
            if not _is_number(value) or value < 0 or value >= 1:
                errors.append(ValidationError(
                    field="conservation_tolerance",
                    message="Must be a non-negative number below 1",
                    value=value
                ))

        return errors

    @classmethod
    def validate_config(cls, config: dict[str, Any]) -> list[ValidationError]:
        """Validate a complete merged configuration."""
        errors = []

        errors.extend(cls.validate_storage_params(config.get("storage", {})))
        errors.extend(cls.validate_logging_params(config.get("logging", {})))
        errors.extend(cls.validate_accounting_params(config.get("accounting", {})))

        return errors
