"""
Logging for pirwatch

Every pirwatch logger writes to stderr, stdout carries the motion events. Warnings and errors can also be kept in a
rotating file per module. Loggers are created at import time with the defaults and reconfigured once the settings are
loaded.
"""
import logging
import sys
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path

PIRWATCH_LOGGER_NAME: str = 'pirwatch'
DEFAULT_LOG_PATH: Path = Path('/var/log/pirwatch')
LOG_FILE_MAX_BYTES: int = 5 * 1024 * 1024

LOG_FORMATTER: logging.Formatter = \
    logging.Formatter('[%(asctime)s - %(levelname)s - %(name)s/%(funcName)s]: %(message)s')


@dataclass
class LoggingConfig:
    debug: bool = False
    level: int = logging.INFO
    log_path: Path = DEFAULT_LOG_PATH
    file_logging: bool = False

    @property
    def effective_level(self) -> int:
        return logging.DEBUG if self.debug else self.level


# Only modified through set_logging_configuration
_config: LoggingConfig = LoggingConfig()


def current_logging_config() -> LoggingConfig:
    return _config


def set_logging_configuration(debug: bool,
                              log_path: str | Path | None = None,
                              log_level: int | None = logging.INFO,
                              disable_file_logging: bool = True) -> None:
    """
    Replaces the logging configuration and applies it to every pirwatch logger already created

    Args:
        debug: forces the DEBUG level on the console and the log files
        log_path: directory of the log files, the current one is kept when None
        log_level: console level
        disable_file_logging: when False, warnings and errors are also written to <log_path>/<module>.log
    """
    global _config
    _config = LoggingConfig(debug=debug,
                            level=log_level if log_level is not None else logging.INFO,
                            log_path=Path(log_path) if log_path is not None else _config.log_path,
                            file_logging=not disable_file_logging)

    if _config.file_logging:
        _config.log_path.mkdir(parents=True, exist_ok=True)

    recompute_pirwatch_loggers()


def is_pirwatch_logger(name: str) -> bool:
    return name == PIRWATCH_LOGGER_NAME or name.startswith(PIRWATCH_LOGGER_NAME + '.')


def log_file_name(logger_name: str) -> str:
    """
    pirwatch -> pirwatch, pirwatch.gpio.value -> gpio_value, pirwatch.__main__ -> main
    """
    parts = logger_name.split('.')
    if len(parts) > 1 and parts[0] == PIRWATCH_LOGGER_NAME:
        parts = parts[1:]
    return '_'.join(p.strip('_') for p in parts)


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(LOG_FORMATTER)
    handler.setLevel(_config.effective_level)
    return handler


def _file_handler(logger_name: str) -> logging.Handler:
    handler = RotatingFileHandler(_config.log_path / f"{log_file_name(logger_name)}.log",
                                  maxBytes=LOG_FILE_MAX_BYTES)
    handler.setFormatter(LOG_FORMATTER)
    handler.setLevel(logging.DEBUG if _config.debug else logging.WARNING)
    return handler


def _configure(target: logging.Logger) -> logging.Logger:
    target.propagate = False
    target.setLevel(_config.effective_level)

    for handler in list(target.handlers):
        target.removeHandler(handler)
        handler.close()

    target.addHandler(_console_handler())
    if _config.file_logging:
        target.addHandler(_file_handler(target.name))

    return target


def get_pirwatch_logger(name: str) -> logging.Logger:
    """
    Returns the logger of a pirwatch module configured with the current settings. Expects the module `__name__`.
    """
    return _configure(logging.getLogger(name))


def recompute_pirwatch_loggers() -> None:
    for name, existing in list(logging.root.manager.loggerDict.items()):
        if isinstance(existing, logging.Logger) and is_pirwatch_logger(name):
            _configure(existing)
