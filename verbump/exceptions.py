"""
Exceptions raised by verbump.

Every error derives from :class:`VerbumpError`. Keyword context passed to
an error (URL, file, package...) is kept in ``details`` and appended to
the message, so a single ``str(exc)`` is enough for the CLI to report it.

Unrecognized version strings are *not* errors: the specifier parser
returns ``None`` for them and callers skip the dependency.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

_MAX_BODY = 200


class VerbumpError(Exception):
    """Base exception for all verbump errors.

    Args:
        message: Human-readable error message.
        **details: Context for diagnostics; ``None`` values are dropped.
    """

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = {
            key: value for key, value in details.items() if value is not None
        }

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"


class ParseError(VerbumpError):
    """A manifest could not be decoded."""

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        line_number: Optional[int] = None,
    ) -> None:
        super().__init__(message, file=file_path, line=line_number)
        self.file_path = file_path
        self.line_number = line_number


class NetworkError(VerbumpError):
    """A registry request failed or returned something unusable.

    The response body, when given, is kept whole on ``response_body`` and
    shortened in ``details``.
    """

    def __init__(
        self,
        message: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ) -> None:
        snippet = None
        if response_body is not None:
            snippet = response_body[:_MAX_BODY] + ("..." if len(response_body) > _MAX_BODY else "")
        super().__init__(message, url=url, status_code=status_code, response=snippet)
        self.url = url
        self.status_code = status_code
        self.response_body = response_body


class RegistryError(NetworkError):
    """The registry has no document for a package."""

    def __init__(
        self,
        message: str,
        *,
        package_name: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.package_name = package_name
        if package_name is not None:
            self.details["package"] = package_name


class FileOperationError(VerbumpError):
    """Reading, writing or backing up a file failed."""

    def __init__(
        self,
        message: str,
        *,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
        original_error: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, path=file_path, operation=operation)
        self.file_path = file_path
        self.operation = operation
        self.original_error = original_error


class ConfigError(VerbumpError):
    """A configuration file is unreadable or holds invalid options."""

    def __init__(
        self,
        message: str,
        *,
        config_path: Optional[str] = None,
        option: Optional[str] = None,
    ) -> None:
        super().__init__(message, path=config_path, option=option)
        self.config_path = config_path
        self.option = option
