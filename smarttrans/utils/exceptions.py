"""
Custom exceptions for smarttrans.

Usage:
    from smarttrans.utils.exceptions import ProviderRateLimited

    raise ProviderRateLimited("Too many requests", api_name="deepl", status_code=429)

Containment rules:
    ParseFailure            construct left as literal text, parsing continues
    ProviderRateLimited     retried with bounded backoff, then batch fails
    ProviderAuthFailure     batch fails immediately, no retry
    ProviderNetworkError    batch fails immediately, no retry
    ProviderBadResponse     that batch fails, other batches unaffected
    ReconstructionMismatch  degraded output + warning, never raised to callers
"""
from typing import Optional, Dict, Any


class SmartTransError(Exception):
    """Base exception for all smarttrans errors."""

    def __init__(
        self,
        message: str,
        *,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        parts = [self.message]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


class ParseFailure(SmartTransError):
    """Malformed placeholder construct."""

    def __init__(
        self,
        message: str,
        *,
        span: Optional[str] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, cause=cause, details=details)
        self.span = span
        if span is not None:
            self.details["span"] = span


class ConfigError(SmartTransError):
    """Error in configuration."""

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, cause=cause, details=details)
        self.config_key = config_key
        self.expected_type = expected_type
        if config_key:
            self.details["config_key"] = config_key
        if expected_type:
            self.details["expected_type"] = expected_type


class ProviderError(SmartTransError):
    """Non-success answer from a translation provider."""

    def __init__(
        self,
        message: str,
        *,
        api_name: str = "Unknown",
        status_code: Optional[int] = None,
        response: Optional[str] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, cause=cause, details=details)
        self.api_name = api_name
        self.status_code = status_code
        self.response = response
        self.details["api"] = api_name
        if status_code:
            self.details["status_code"] = status_code


class ProviderAuthFailure(ProviderError):
    """Rejected credentials (401/403). Never retried."""


class ProviderRateLimited(ProviderError):
    """Rate limit response (429). Retried with backoff."""


class ProviderBadResponse(ProviderError):
    """Success status with a body that cannot be used."""


class ProviderNetworkError(ProviderError):
    """Transport failure before a response arrived."""


class ReconstructionMismatch(SmartTransError):
    """A marker could not be located in the translated carrier."""

    def __init__(
        self,
        message: str,
        *,
        marker: Optional[str] = None,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, cause=cause, details=details)
        self.marker = marker
        if marker:
            self.details["marker"] = marker
