"""Error code registry and the exceptions raised by the conversion pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Type

GENERIC_FAILURE_MESSAGE = "Conversion failed. Please try a different file or format."


@dataclass(frozen=True)
class ErrorCodeSpec:
    code: str
    message: str
    status: int
    recoverable: bool = False


@dataclass(frozen=True)
class ConversionFailure:
    """Failure descriptor handed back to the caller instead of a result."""

    error_code: str
    error_status: int
    message: str
    recoverable: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "status": "failure",
            "error_code": self.error_code,
            "error_status": self.error_status,
            "message": self.message,
            "recoverable": self.recoverable,
        }


class ErrorRegistry:
    def __init__(self) -> None:
        self._codes: Dict[str, ErrorCodeSpec] = {}

    def register(self, spec: ErrorCodeSpec) -> None:
        if spec.code in self._codes:
            raise ValueError(f"Error code {spec.code} already registered")
        self._codes[spec.code] = spec

    def get(self, code: str) -> ErrorCodeSpec:
        if code not in self._codes:
            raise KeyError(f"Unknown error code: {code}")
        return self._codes[code]


ERRORS = ErrorRegistry()


def register_default_errors() -> None:
    ERRORS.register(
        ErrorCodeSpec(
            code="ERR_FILE_TOO_LARGE",
            message="File exceeds the configured size limit",
            status=4201,
            recoverable=True,
        )
    )
    ERRORS.register(
        ErrorCodeSpec(
            code="ERR_VALIDATION_REJECTED",
            message="File type is not accepted for the active category",
            status=4203,
            recoverable=True,
        )
    )
    ERRORS.register(
        ErrorCodeSpec(
            code="ERR_DECODE_FAILED",
            message="Source image could not be decoded",
            status=4221,
        )
    )
    ERRORS.register(
        ErrorCodeSpec(
            code="ERR_CONVERSION_FAILED",
            message=GENERIC_FAILURE_MESSAGE,
            status=5001,
        )
    )
    ERRORS.register(
        ErrorCodeSpec(
            code="ERR_ENCODE_FAILED",
            message="Target encoding produced no output",
            status=5002,
        )
    )


register_default_errors()


class ConversionError(Exception):
    default_code = "ERR_CONVERSION_FAILED"

    def __init__(self, detail: Optional[str] = None, *, code: Optional[str] = None) -> None:
        self.code = code or self.default_code
        self.spec = ERRORS.get(self.code)
        self.detail = detail or self.spec.message
        super().__init__(self.detail)

    def to_failure(self, message: Optional[str] = None) -> ConversionFailure:
        return ConversionFailure(
            error_code=self.spec.code,
            error_status=self.spec.status,
            message=message or self.detail,
            recoverable=self.spec.recoverable,
        )


class ValidationRejected(ConversionError):
    default_code = "ERR_VALIDATION_REJECTED"


class DecodeError(ConversionError):
    default_code = "ERR_DECODE_FAILED"


class EncodeError(ConversionError):
    default_code = "ERR_ENCODE_FAILED"


class GenericConversionFailure(ConversionError):
    default_code = "ERR_CONVERSION_FAILED"


_EXCEPTIONS: Dict[str, Type[ConversionError]] = {
    "ERR_FILE_TOO_LARGE": ValidationRejected,
    "ERR_VALIDATION_REJECTED": ValidationRejected,
    "ERR_DECODE_FAILED": DecodeError,
    "ERR_ENCODE_FAILED": EncodeError,
    "ERR_CONVERSION_FAILED": GenericConversionFailure,
}


def raise_error(code: str, *, detail: Optional[str] = None) -> None:
    ERRORS.get(code)
    exc_cls = _EXCEPTIONS.get(code, GenericConversionFailure)
    raise exc_cls(detail, code=code)


__all__ = [
    "GENERIC_FAILURE_MESSAGE",
    "ERRORS",
    "ErrorCodeSpec",
    "ErrorRegistry",
    "ConversionFailure",
    "ConversionError",
    "ValidationRejected",
    "DecodeError",
    "EncodeError",
    "GenericConversionFailure",
    "raise_error",
]
