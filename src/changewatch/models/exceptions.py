"""
Errors raised by changewatch.

Only configuration mistakes, watch sessions that cannot start or stop, and
backends missing a required operation are surfaced. Files vanishing mid-scan
and native backends that fail their probe are handled inside the listener.
"""

from typing import Any


class BaseError(Exception):
    """
    Root of every changewatch error.

    Carries a stable ``error_code`` for programmatic checks, a ``context``
    dict naming the path, setting or backend involved, and the lower-level
    exception in ``cause`` when one triggered it.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        name = self.__class__.__name__
        return f"{name}(message={self.message!r}, error_code={self.error_code!r}, context={self.context})"


class ConfigurationError(BaseError):
    """
    Raised when a listener setting is rejected.

    Settings come from ``CHANGEWATCH_`` environment variables, ``.env`` or
    keyword arguments, so ``config_key`` names the field as written in code.
    """

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        expected: str | None = None,
        actual_value: Any | None = None,
    ):
        context = {}
        if config_key:
            context["config_key"] = config_key
        if expected:
            context["expected"] = expected
        if actual_value is not None:
            context["actual_value"] = str(actual_value)

        super().__init__(message, error_code="CONFIG_ERROR", context=context)


class ListenerError(BaseError):
    """Raised when a watch session cannot be started or stopped."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        operation: str | None = None,
        underlying_error: Exception | None = None,
    ):
        context = {}
        if path:
            context["path"] = path
        if operation:
            context["operation"] = operation

        super().__init__(
            message,
            error_code="LISTENER_ERROR",
            context=context,
            cause=underlying_error,
        )


class BackendNotImplementedError(BaseError, NotImplementedError):
    """
    Raised when a listener backend does not provide a required operation.

    This is a programming defect in the backend, not a runtime condition,
    so it is never caught by the engine.
    """

    def __init__(self, backend: str, method: str):
        super().__init__(
            f"{backend} must implement {method}(directory)",
            error_code="BACKEND_NOT_IMPLEMENTED",
            context={"backend": backend, "method": method},
        )
        self.backend = backend
        self.method = method
