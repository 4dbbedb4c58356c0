"""Bridge domain exceptions."""

from __future__ import annotations


class BridgeError(Exception):
    """Base for bridge domain errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, object] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_error = original_error


class ConfigurationError(BridgeError):
    """Config validation or load failure. Fatal at startup."""


class UnresolvedReferenceError(BridgeError):
    """A channel reference in a message could not be resolved to a name."""

    def __init__(self, reference: str) -> None:
        super().__init__(
            f"Unresolved channel reference: {reference}",
            code="unresolved_reference",
            details={"reference": reference},
        )
        self.reference = reference


class TransportError(BridgeError):
    """A network client could not accept an outbound message."""
