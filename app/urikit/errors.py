from __future__ import annotations

from dataclasses import dataclass

DEFAULT_MAX_ERROR_CHARS = 300


@dataclass
class UriError(ValueError):
    code: str
    message: str

    def __str__(self) -> str:
        return self.message


class UriSyntaxError(UriError):
    """A component does not match its grammar."""


class OffsetOutOfBounds(UriError):
    """A label or segment offset falls outside the addressable range."""


class StructuralViolation(UriError):
    """The assembled URI breaks an RFC 3986 section 3 invariant."""


class UnsupportedOperation(UriError):
    """The edit is not defined for this kind of host."""


@dataclass(frozen=True)
class ErrorInfo:
    code: str
    message: str
    kind: str


_KINDS: tuple[tuple[type, str], ...] = (
    (UriSyntaxError, "syntax"),
    (OffsetOutOfBounds, "offset_out_of_bounds"),
    (StructuralViolation, "structural_violation"),
    (UnsupportedOperation, "unsupported_operation"),
)


def _truncate(value: str, *, max_chars: int) -> str:
    s = str(value or "")
    if max_chars <= 0 or len(s) <= max_chars:
        return s
    return s[: max(0, max_chars - 3)] + "..."


def classify_exception(
    exc: Exception, *, max_error_chars: int = DEFAULT_MAX_ERROR_CHARS
) -> ErrorInfo:
    for error_type, kind in _KINDS:
        if isinstance(exc, error_type):
            return ErrorInfo(
                code=str(exc.code or kind),
                message=_truncate(str(exc), max_chars=max_error_chars),
                kind=kind,
            )

    if isinstance(exc, UriError):
        return ErrorInfo(
            code=str(exc.code or "invalid_uri"),
            message=_truncate(str(exc), max_chars=max_error_chars),
            kind="uri",
        )

    # idna.IDNAError and codec failures are UnicodeError subclasses
    if isinstance(exc, UnicodeError):
        return ErrorInfo(
            code="invalid_idna",
            message=_truncate(str(exc), max_chars=max_error_chars),
            kind="syntax",
        )

    return ErrorInfo(
        code="internal_error",
        message=_truncate(exc.__class__.__name__, max_chars=max_error_chars),
        kind="internal",
    )
