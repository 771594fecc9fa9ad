"""
Configuration Exceptions

Exceptions raised while loading and validating memfs configuration.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any


class ConfigException(Exception):
    """
    Base exception for configuration errors.

    Attributes:
        message: Human-readable error description
        error_code: Numeric error code for programmatic handling
        context: Additional context about the error

    Example:
        >>> raise ConfigException("Bad configuration", error_code=1000)
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or 1000
        self.context = context or {}

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({context_str})"
        return base

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code})"
        )


class ConfigLoadError(ConfigException):
    """
    A configuration file could not be read or parsed.

    Example:
        >>> raise ConfigLoadError("Invalid JSON", config_path="memfs.json")
    """

    def __init__(
        self,
        message: str,
        config_path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if config_path:
            ctx["config_path"] = config_path
        super().__init__(message=message, error_code=1001, context=ctx)
        self.config_path = config_path


class ConfigValidationError(ConfigException):
    """
    A configuration key is unknown or its value is invalid.

    Example:
        >>> raise ConfigValidationError("Invalid configuration key", key="fs.depth")
    """

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if key:
            ctx["key"] = key
        super().__init__(message=message, error_code=1002, context=ctx)
        self.key = key
