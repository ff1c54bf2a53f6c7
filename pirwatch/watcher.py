"""
    Edge wait loop. Blocks on the GPIO value stream and calls the sink every time the pin reads high after a
    change notification.
"""
import logging
from enum import Enum, auto

from pirwatch.common.constants import CTE
from pirwatch.common.pirwatch_logging import get_pirwatch_logger
from pirwatch.gpio.value import GpioValueStream
from pirwatch.sinks import EventSink

logger: logging.Logger = get_pirwatch_logger(__name__)


class WatchState(Enum):
    ARMED = auto()
    REACTING = auto()


class EdgeWatcher:
    """
    Samples the pin level on every wake up. Several toggles between two wake ups are seen as one, and two
    consecutive wake ups reading high are reported twice.
    """

    def __init__(self, stream: GpioValueStream, sink: EventSink):
        self.stream: GpioValueStream = stream
        self.sink: EventSink = sink
        self.state: WatchState = WatchState.ARMED
        self.events_detected: int = 0

    def step(self) -> bool:
        """
        Runs one wait/react cycle

        Returns: True if the sink was triggered

        Raises:
            GpioWaitError: the wait failed
            PublishError: the sink failed to publish the event
        """
        self.state = WatchState.ARMED
        self.stream.wait_for_change()

        self.state = WatchState.REACTING
        value = self.stream.read_latest()
        logger.debug(f"GPIO {self.stream.pin} changed, value: {value}")

        triggered = value == CTE.GPIO_HIGH
        if triggered:
            self.events_detected += 1
            self.sink.on_motion()

        self.state = WatchState.ARMED
        return triggered

    def run(self) -> None:
        """ Loops until the wait or the sink raise """
        logger.info(f"Watching GPIO {self.stream.pin} for motion")
        try:
            while True:
                self.step()
        finally:
            logger.info(f"Stopped watching GPIO {self.stream.pin} after {self.events_detected} motion events")
