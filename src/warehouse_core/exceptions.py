"""Domain-specific exceptions for the warehouse silver layer.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from WarehouseError for easy catching.
"""

from __future__ import annotations


class WarehouseError(Exception):
    """Base exception for all warehouse_core errors.

    Users can catch this exception to handle any error raised by the package.
    """

    pass


class ConfigError(WarehouseError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - Invalid configuration values are provided
    - Required configuration is missing
    - The conformed database URL cannot be used
    """

    pass


class LoadError(WarehouseError):
    """Raised when a full silver load aborts.

    Attributes:
        code: Short error classification (e.g. ``not_found``, ``data_exception``,
            or the class name of an unexpected exception).
        table: Name of the table being loaded when the error happened, if any.
    """

    default_code = "load_failed"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        table: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.table = table

    def __str__(self) -> str:
        where = f" [{self.table}]" if self.table else ""
        return f"{self.code}{where}: {self.message}"


class MissingInputError(LoadError):
    """Raised when an expected landing table (source file) is absent."""

    default_code = "not_found"


class MalformedDataError(LoadError):
    """Raised when a landing value cannot be converted to its target type.

    This exception is raised when:
    - A numeric column holds non-numeric text
    - A date column holds text that is not a valid date
    - An 8-digit YYYYMMDD sales date is not a calendar date
    """

    default_code = "data_exception"


class DataQualityError(WarehouseError):
    """Raised when silver quality checks cannot run.

    This exception is raised when required tables or columns are missing
    from the frames handed to the QA checks.
    """

    pass
