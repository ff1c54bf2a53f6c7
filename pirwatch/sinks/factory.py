"""
Event sink factory.
"""
import logging
from typing import TextIO

from pirwatch.common.pirwatch_logging import get_pirwatch_logger
from pirwatch.sinks import EventSink, SinkType, get_sink

logger: logging.Logger = get_pirwatch_logger(__name__)


def create_sink(settings, stream: TextIO | None = None) -> EventSink:
    """
    Returns the sink selected by the settings. A complete Redis publish target always selects the Redis sink,
    the Redis sink without a target degrades to timestamp printing.

    Args:
        settings: WatchSettings of this run
        stream: output stream, stdout if None

    Returns:
        EventSink: not yet opened sink

    """
    target = settings.publish_target
    sink_type = SinkType(settings.sink)

    if target is not None and sink_type != SinkType.REDIS:
        logger.warning(f"Redis parameters provided, using the {SinkType.REDIS} sink instead of {sink_type}")
        sink_type = SinkType.REDIS
    elif target is None and sink_type == SinkType.REDIS:
        logger.warning(f"No Redis parameters provided, falling back to the {SinkType.TIMESTAMP} sink")
        sink_type = SinkType.TIMESTAMP

    sink_class = get_sink(sink_type)
    logger.info(f"Reporting motion with the {sink_type} sink")

    if sink_type == SinkType.REDIS:
        return sink_class(target, stream=stream)
    return sink_class(stream=stream)
