"""
    Event sinks react to a detected motion pulse. Sinks register themselves by name so the watcher can
    select one at startup.
"""
import logging
import sys
from abc import ABC, abstractmethod
from typing import Dict, TextIO

from strenum import LowercaseStrEnum
from enum import auto

from pirwatch.common.pirwatch_logging import get_pirwatch_logger

logger: logging.Logger = get_pirwatch_logger(__name__)


class SinkType(LowercaseStrEnum):
    DOT = auto()
    TIMESTAMP = auto()
    REDIS = auto()


class EventSink(ABC):
    """
    Base class of the motion reporters. Console output goes to the given stream, stdout by default.
    """
    sink_name: str = ''

    def __init__(self, stream: TextIO | None = None):
        self._stream: TextIO | None = stream
        self._output_broken: bool = False

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def write(self, text: str) -> bool:
        """
        Writes and flushes text to the output stream. A closed consumer (broken pipe) is reported once and
        does not stop the watcher.

        Returns: True if the text was written
        """
        try:
            self.stream.write(text)
            self.stream.flush()
            return True
        except OSError as ex:
            if not self._output_broken:
                logger.warning(f"Unable to write to the output stream, further output is lost. ({ex})")
                self._output_broken = True
            return False

    def open(self) -> 'EventSink':
        return self

    @abstractmethod
    def on_motion(self) -> None:
        """ Called once per notification that reads a high value """
        ...

    def close(self) -> None:
        ...

    def __enter__(self) -> 'EventSink':
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class Sinks:
    """
    Wrapper class for available sinks

        active_sinks: Currently registered sink classes
    """
    active_sinks: Dict[str, type[EventSink]] = {}

    @classmethod
    def get_sink(cls, sink_name: str) -> type[EventSink] | None:
        return cls.active_sinks.get(sink_name)

    @classmethod
    def register_sink(cls, sink_name: str, p_sink: type[EventSink]):
        logger.debug(f'Sink {sink_name} registered')
        cls.active_sinks[sink_name] = p_sink

    @classmethod
    def sink(cls, sink_name: str | None = None):
        """
        Registers the decorated class under the provided name, the class name otherwise
        Args:
            sink_name: name the sink is selected by

        Returns: the decorated class

        """
        def decorator(sink_class):
            _sink_name = str(sink_name or sink_class.__name__)

            setattr(sink_class, 'sink_name', _sink_name)

            if _sink_name in cls.active_sinks:
                logger.error(f'Sink {_sink_name} is already defined')
            else:
                cls.register_sink(_sink_name, sink_class)

            return sink_class
        return decorator


sink = Sinks.sink
get_sink = Sinks.get_sink
active_sinks = Sinks.active_sinks

from pirwatch.sinks import console, redis_publisher  # noqa: E402,F401
