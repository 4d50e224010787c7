from .logging import CustomJsonFormatter, OTLPJsonFormatter, LOGGER_LEVELS, build_formatter, configure_logger, init_loggers
