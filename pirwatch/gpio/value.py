"""
    GPIO value file with the kernel change notification.

    sysfs signals a level change on the value file as a priority (POLLPRI) event. The notification is only
    re-armed once the file has been read up to its end, so every read seeks back to the start, takes the first
    character and drains the rest.
"""
import logging
import select
from pathlib import Path
from typing import BinaryIO, Callable

from pirwatch.common.constants import CTE
from pirwatch.common.exceptions import GpioResourceError, GpioWaitError
from pirwatch.common.pirwatch_logging import get_pirwatch_logger
from pirwatch.common.utils import describe_os_error
from pirwatch.gpio.config import gpio_pin_path

logger: logging.Logger = get_pirwatch_logger(__name__)

PollerFactory = Callable[[], 'select.poll']


class GpioValueStream:
    """
    Owns the value file of a single GPIO pin for the life of the watcher.

    Usage:
        with GpioValueStream('17') as stream:
            stream.prime()
            while True:
                stream.wait_for_change()
                value = stream.read_latest()
    """

    WAIT_EVENTS: int = select.POLLPRI | select.POLLERR

    def __init__(self,
                 pin: str,
                 gpio_root: str | Path = CTE.GPIO_SYSFS_ROOT,
                 poller_factory: PollerFactory = select.poll):
        self.pin: str = pin
        self.value_file: Path = gpio_pin_path(pin, gpio_root) / CTE.GPIO_VALUE_ATTR
        self._poller_factory: PollerFactory = poller_factory
        self._file: BinaryIO | None = None
        self._poller = None

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def open(self) -> 'GpioValueStream':
        try:
            self._file = open(self.value_file, 'rb', buffering=0)
        except OSError as ex:
            raise GpioResourceError(f"Unable to open GPIO value. ({describe_os_error(ex)})") from ex

        self._poller = self._poller_factory()
        self._poller.register(self._file.fileno(), self.WAIT_EVENTS)
        logger.debug(f"Opened {self.value_file}")
        return self

    def close(self):
        if self._file is None:
            return
        try:
            self._poller.unregister(self._file.fileno())
        except (KeyError, ValueError, OSError):
            logger.debug(f"{self.value_file} was not registered for polling")
        self._poller = None
        self._file.close()
        self._file = None
        logger.debug(f"Closed {self.value_file}")

    def __enter__(self) -> 'GpioValueStream':
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def _drain(self) -> None:
        while self._file.read(CTE.DRAIN_CHUNK_SIZE):
            pass

    def prime(self) -> str:
        """
        Checks the pin yields a value before starting and consumes all pending data so the first wait blocks
        until a real change happens.

        Returns: the current value of the pin

        Raises:
            GpioResourceError: if the value cannot be read or the file is empty
        """
        try:
            value = self._file.read(1)
            if not value:
                raise GpioResourceError("Failed to read GPIO value. (No data)")
            self._drain()
        except OSError as ex:
            raise GpioResourceError(f"Failed to read GPIO value. ({describe_os_error(ex)})") from ex

        current = value.decode(errors='replace')
        logger.info(f"GPIO {self.pin} initial value: {current}")
        return current

    def wait_for_change(self) -> None:
        """
        Blocks, with no timeout, until the kernel signals a change on the value file.

        Raises:
            GpioWaitError: if the wait primitive fails
        """
        try:
            self._poller.poll()
        except OSError as ex:
            raise GpioWaitError(f"Failed to poll for GPIO value. ({describe_os_error(ex)})") from ex

    def read_latest(self) -> str | None:
        """
        Rewinds the value file, reads the current level and discards whatever remains so queued notifications
        are cleared.

        Returns: the current value ('0' or '1'), None if the read failed
        """
        try:
            self._file.seek(0)
            value = self._file.read(1)
            self._drain()
        except OSError as ex:
            logger.warning(f"Failed to read GPIO value. ({describe_os_error(ex)})")
            return None

        if not value:
            logger.warning("Failed to read GPIO value. (No data)")
            return None

        return value.decode(errors='replace')
