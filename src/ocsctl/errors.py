"""
Error taxonomy for ocsctl.

Every error surfaced to the operator derives from ``InvokeError`` and
carries a stable ``kind`` plus enough structured detail (``to_dict``) for a
UI to render a precise message without inspecting internals.

- SchemaError / ConfigError: fatal at startup.
- CoercionError: bad operator input, recoverable.
- CallError / BuildError / SubmitError: remote or build failures; only
  SigningFailedError is fatal.
- DispatchError: unknown method name.
"""

from __future__ import annotations

from typing import Any, Optional


class InvokeError(RuntimeError):
    exit_code: int = 1
    kind: str = "error"
    fatal: bool = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


# ============ Startup ============


class SchemaError(InvokeError):
    exit_code = 2
    kind = "schema"
    fatal = True

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.errors:
            result["errors"] = list(self.errors)
        return result


class ConfigError(InvokeError):
    exit_code = 2
    kind = "config"
    fatal = True


# ============ Type coercion ============


class CoercionError(InvokeError):
    """Operator input does not fit the declared type.

    ``path`` locates the bad value inside arrays/structs, e.g. ``to[2].amount``.
    """

    exit_code = 3
    kind = "type"

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path

    def at(self, path: str) -> "CoercionError":
        """Return a copy of this error located at ``path``."""
        located = type(self)(self.message, path=path)
        located.__cause__ = self.__cause__
        return located

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.path:
            result["path"] = self.path
        return result


class IntegerOverflowError(CoercionError):
    kind = "type.overflow"


class InvalidIntegerError(CoercionError):
    kind = "type.invalid_integer"


class InvalidAddressError(CoercionError):
    kind = "type.invalid_address"


class InvalidBooleanError(CoercionError):
    kind = "type.invalid_boolean"


class InvalidBytesError(CoercionError):
    kind = "type.invalid_bytes"


class MalformedValueError(CoercionError):
    kind = "type.malformed"


class LengthMismatchError(CoercionError):
    kind = "type.length_mismatch"


# ============ Query ============


class CallError(InvokeError):
    exit_code = 4
    kind = "call"


class CallNetworkError(CallError):
    kind = "call.network"


class RevertError(CallError):
    kind = "call.revert"


class DecodeMismatchError(CallError):
    """Reply shape does not match the declared return type.

    Points at a schema / remote version mismatch rather than a logic rejection.
    """

    kind = "call.decode_mismatch"


# ============ Build & sign ============


class BuildError(InvokeError):
    exit_code = 5
    kind = "build"


class ArgumentCountMismatchError(BuildError):
    kind = "build.argument_count"

    def __init__(self, method: str, expected: int, supplied: int) -> None:
        super().__init__(
            f"{method} expects {expected} argument(s), got {supplied}"
        )
        self.method = method
        self.expected = expected
        self.supplied = supplied

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["expected"] = self.expected
        result["supplied"] = self.supplied
        return result


class EncodingFailedError(BuildError):
    kind = "build.encoding"

    def __init__(self, message: str, error: Optional[CoercionError] = None) -> None:
        super().__init__(message)
        self.error = error

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.error is not None:
            result["cause"] = self.error.to_dict()
        return result


class SigningFailedError(BuildError):
    exit_code = 6
    kind = "build.signing"
    fatal = True


# ============ Submission & confirmation ============


class SubmitError(InvokeError):
    exit_code = 7
    kind = "submit"

    def __init__(self, message: str, tx_hash: Optional[str] = None) -> None:
        super().__init__(message)
        self.tx_hash = tx_hash

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.tx_hash:
            result["tx_hash"] = self.tx_hash
        return result


class RejectedError(SubmitError):
    """The remote refused the transaction outright (stale nonce, balance...)."""

    kind = "submit.rejected"


class SubmitNetworkError(SubmitError):
    kind = "submit.network"


class ConfirmationTimeoutError(SubmitError):
    """Polling gave up; the transaction's fate is unknown, not failed."""

    exit_code = 8
    kind = "submit.timeout"


class ConfirmationCancelledError(SubmitError):
    exit_code = 8
    kind = "submit.cancelled"


# ============ Dispatch ============


class DispatchError(InvokeError):
    exit_code = 9
    kind = "dispatch"


class UnknownMethodError(DispatchError):
    kind = "dispatch.unknown_method"

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown method: {name}")
        self.name = name
