"""Exception types raised by archflow."""

from typing import Optional


class ArchflowError(Exception):
    """Base class for archflow errors."""


class ProviderError(ArchflowError):
    """A remote model call failed or returned an unusable envelope."""

    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code

    def __str__(self) -> str:
        message = super().__str__()
        if self.provider:
            message = f"[{self.provider}] {message}"
        if self.status_code is not None:
            message = f"{message} (HTTP {self.status_code})"
        return message


class MalformedArtifactError(ArchflowError):
    """Model output could not be parsed into the expected structure."""

    def __init__(self, message: str, *, raw_text: Optional[str] = None):
        super().__init__(message)
        self.raw_text = raw_text


class SessionBusyError(ArchflowError):
    """A session was asked to send while a previous turn is still pending."""
