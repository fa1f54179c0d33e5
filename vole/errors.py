"""Custom exceptions for the Vole machine simulator."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class ErrorInfo:
    """Structured error information for API responses."""
    type: str
    message: str
    step: int
    addr: int
    token: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "message": self.message,
            "step": self.step,
            "addr": self.addr,
            "token": self.token,
        }


class VoleError(Exception):
    """Base exception for all Vole errors."""

    def __init__(
        self,
        message: str,
        step: int = 0,
        addr: int = 0,
        token: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.step = step
        self.addr = addr
        self.token = token

    def to_error_info(self) -> ErrorInfo:
        return ErrorInfo(
            type=self.__class__.__name__,
            message=self.message,
            step=self.step,
            addr=self.addr,
            token=self.token,
        )


class LoadError(VoleError):
    """Error while loading a program into memory."""
    pass


class FileOpenFailed(LoadError):
    """Program file could not be opened."""
    pass


class StreamReadFailed(LoadError):
    """Program text contains a token that is not a hexadecimal word."""
    pass


class TooManyInstructions(LoadError):
    """Program does not fit in memory."""
    pass


class VoleRuntimeError(VoleError):
    """Error during program execution."""
    pass


class MemoryAccessError(VoleRuntimeError):
    """Memory address out of bounds."""
    pass


class RegisterAccessError(VoleRuntimeError):
    """Register index out of bounds."""
    pass


class StepLimitExceeded(VoleRuntimeError):
    """Maximum step count exceeded."""
    pass
