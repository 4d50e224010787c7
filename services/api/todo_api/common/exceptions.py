from enum import Enum
import traceback

def format_exception_string(e: Exception,source:str = "APP", comment: str = ""): #For loggers
    return f'[{source}: Exception] {comment}\n\nTraceback:\n{traceback.format_exception(e)}'


class ErrorKind(str, Enum):
    """Stable, protocol-independent error categories. Outer layers translate these into status codes."""
    INVALID_ARGUMENT = "invalid_argument"
    INVALID_STATE = "invalid_state"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    UNAUTHORIZED = "unauthorized"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class AppBaseException(Exception):
    """Global base exception"""
    kind: ErrorKind = ErrorKind.INTERNAL

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else self.__class__.__doc__ or self.__class__.__name__
