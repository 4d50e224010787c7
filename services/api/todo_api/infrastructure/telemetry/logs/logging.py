import logging, sys
import os
from pythonjsonlogger.json import JsonFormatter
from todo_api.common.config import Config
from opentelemetry import trace

__all__ = ['CustomJsonFormatter', 'OTLPJsonFormatter', 'LOGGER_LEVELS', 'build_formatter', 'configure_logger', 'init_loggers']

#'app.storage' has no handlers of its own and propagates into 'app'
LOGGER_LEVELS: dict[str, str | None] = {
    'app': None, #Config.LOG_LEVEL
    'app.storage': 'INFO',
}


class CustomJsonFormatter(JsonFormatter):
    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['pid'] = os.getpid()
        log_record['service'] = Config.OTEL_SERVICE_NAME
        log_record['version'] = Config.APP_VERSION
        log_record['commit'] = Config.GIT_COMMIT
        log_record['env'] = Config.MODE
        log_record['message'] = record.getMessage()


class OTLPJsonFormatter(CustomJsonFormatter):
    """Adds ids of the active span, so log lines can be joined with traces"""

    def __init__(self, *args, trace_provider=None, **kwargs):
        super().__init__(*args, **kwargs)
        self._trace_provider = trace_provider or trace

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        ctx = self._trace_provider.get_current_span().get_span_context()
        if ctx.is_valid:
            log_record['trace_id'] = format(ctx.trace_id, '032x')
            log_record['span_id'] = format(ctx.span_id, '016x')


def build_formatter(json_logs: bool) -> logging.Formatter:
    if json_logs:
        return OTLPJsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s")
    return logging.Formatter(
        "[%(asctime)s] %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )


def configure_logger(name: str, stream=sys.stdout, level: int | str | None = None) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level or Config.LOG_LEVEL)
    logger.handlers.clear()
    stream_handler = logging.StreamHandler(stream)
    stream_handler.setFormatter(build_formatter(Config.JSON_LOGS == 1))
    logger.addHandler(stream_handler)
    return logger


def init_loggers():
    """Edit LOGGER_LEVELS to add loggers. Only 'app' gets a handler."""
    configure_logger('app', level=LOGGER_LEVELS['app'])
    for name, level in LOGGER_LEVELS.items():
        if name != 'app' and level:
            logging.getLogger(name).setLevel(level)
    #Requests are logged by the app itself
    logging.getLogger("uvicorn.access").handlers = []
    logging.getLogger("uvicorn.access").propagate = False
