from __future__ import annotations


class UnboxError(Exception):
    """Base class for errors raised by the unbox package."""


class InvalidPool(UnboxError):
    """Selection input is empty or carries no weight."""


class RemoteUnavailable(UnboxError):
    """A document-store call failed (transport, status or payload)."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class MalformedCredential(UnboxError):
    """The stored token could not be decoded into a service account."""


class CredentialStorageError(UnboxError):
    """The credential file could not be written."""
