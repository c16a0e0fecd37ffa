"""Error hierarchy for AdGuard GitOps Controller."""

from typing import Iterable, Optional


class AdGuardError(Exception):
    """Base class for every failure of a reconciliation cycle."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def with_context(self, context: str) -> "AdGuardError":
        """
        Return a copy of this error prefixed with subsystem context.

        The concrete error kind and its extra attributes are preserved so
        callers can still react on the type.
        """
        clone = _copy_error(self)
        clone.message = f"{context}: {self.message}"
        clone.args = (clone.message,)
        return clone

    def __str__(self) -> str:
        return self.message


class RemoteUnreachable(AdGuardError):
    """Transport-level failure while calling the AdGuard Home API."""


class RemoteRejected(AdGuardError):
    """The AdGuard Home API answered with an error status."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NotFound(AdGuardError):
    """A keyed resource does not exist on the remote side."""

    def __init__(self, message: str, kind: str = "", key: str = ""):
        super().__init__(message)
        self.kind = kind
        self.key = key


class ValidationFailed(AdGuardError):
    """A declared value is not part of the live enumeration."""

    def __init__(self, message: str, attribute: str = "", value: str = "",
                 valid_values: Iterable[str] = ()):
        super().__init__(message)
        self.attribute = attribute
        self.value = value
        self.valid_values = sorted(valid_values)


class MappingFailed(AdGuardError):
    """A shape conversion between declared and remote form failed."""


def _copy_error(error: AdGuardError) -> AdGuardError:
    clone = error.__class__.__new__(error.__class__)
    clone.__dict__.update(error.__dict__)
    clone.__cause__ = error.__cause__
    return clone
