from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode
import todo_api.infrastructure.interfaces as iabc
import contextlib, typing as t, functools, inspect

__all__ = ['OTELTracer']

F = t.TypeVar("F", bound=t.Callable[..., t.Any])


class OTELTracer(iabc.ITracer):
    """Spans over the OpenTelemetry API. They stay no-op until `setup_opentelemetry` installs a provider."""

    def __init__(self, tracer_name: str):
        self._tracer = trace.get_tracer(tracer_name)

    @staticmethod
    @contextlib.contextmanager
    def start_span(name: str, **attributes: t.Any):
        tracer = trace.get_tracer(__name__)
        with tracer.start_as_current_span(name, attributes=attributes or None) as span:
            yield span

    @staticmethod
    def get_trace_id(span) -> str:
        return format(span.get_span_context().trace_id, '032x')

    @staticmethod
    def traced(func: F) -> F:
        """Wraps sync and async callables into a span named after their qualname.
        A raised exception is recorded, marks the span as failed and is re-raised."""
        tracer = trace.get_tracer(func.__module__)
        attributes = {"code.function": func.__qualname__, "code.namespace": func.__module__}

        @contextlib.contextmanager
        def function_span():
            with tracer.start_as_current_span(
                func.__qualname__,
                attributes=attributes,
                record_exception=False,
                set_status_on_exception=False,
            ) as span:
                try:
                    yield span
                except Exception as e:
                    span.record_exception(e)
                    span.set_status(Status(StatusCode.ERROR, type(e).__name__))
                    raise

        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                with function_span():
                    return await func(*args, **kwargs)
            return t.cast(F, async_wrapper)

        @functools.wraps(func)
        def sync_wrapper(*args, **kwargs):
            with function_span():
                return func(*args, **kwargs)
        return t.cast(F, sync_wrapper)
