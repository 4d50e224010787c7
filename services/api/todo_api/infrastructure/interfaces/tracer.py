from abc import ABC, abstractmethod
import typing as t

__all__ = ['ITracer']

F = t.TypeVar("F", bound=t.Callable[..., t.Any])


class ITracer(ABC):
    @staticmethod
    @abstractmethod
    def start_span(name: str, **attributes: t.Any) -> t.ContextManager[t.Any]:
        """Context manager opening a child span of the current one"""

    @staticmethod
    @abstractmethod
    def get_trace_id(span) -> str: ...

    @staticmethod
    @abstractmethod
    def traced(func: F) -> F:
        """Decorator for both sync and async callables"""
