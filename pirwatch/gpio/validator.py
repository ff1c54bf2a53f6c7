"""
    Startup checks on the watched GPIO pin. Every failure is fatal, the pin has to be exported and configured
    (direction=in, edge=rising|both) before pirwatch is started.
"""
import logging
import os
from pathlib import Path

from pirwatch.common.constants import CTE
from pirwatch.common.exceptions import InvalidPinError, GpioNotExportedError, GpioPreconditionError
from pirwatch.common.pirwatch_logging import get_pirwatch_logger
from pirwatch.common.utils import describe_os_error, is_numeric
from pirwatch.gpio.config import gpio_pin_path, read_gpio_config

logger: logging.Logger = get_pirwatch_logger(__name__)


def validate_pin_identifier(pin: str) -> None:
    """
    Raises InvalidPinError unless the pin is made of decimal digits only. Does not touch the filesystem.
    """
    if not is_numeric(pin):
        raise InvalidPinError(f"GPIO pin not numeric. ({pin})")


def validate_gpio(pin: str, gpio_root: str | Path = CTE.GPIO_SYSFS_ROOT) -> None:
    """
    Checks the pin is exported, set as an input and armed for rising (or both) edge detection

    Args:
        pin: GPIO pin number, as text
        gpio_root: root of the GPIO sysfs tree

    Raises:
        InvalidPinError: the pin is not numeric
        GpioNotExportedError: the pin directory does not exist
        GpioPreconditionError: direction or edge are not the expected ones
    """
    validate_pin_identifier(pin)

    try:
        os.stat(gpio_pin_path(pin, gpio_root))
    except OSError as ex:
        raise GpioNotExportedError(f"GPIO pin does not appear to be exported. ({describe_os_error(ex)})") from ex

    direction = read_gpio_config(pin, CTE.GPIO_DIRECTION_ATTR, gpio_root)
    if direction != CTE.GPIO_INPUT_DIRECTION:
        raise GpioPreconditionError(f"GPIO pin is not set to input mode. ({direction})")

    edge = read_gpio_config(pin, CTE.GPIO_EDGE_ATTR, gpio_root)
    if edge not in CTE.GPIO_RISING_EDGES:
        raise GpioPreconditionError(f"GPIO pin is not set to detect rising edges. ({edge})")

    logger.info(f"GPIO {pin} ready: direction={direction}, edge={edge}")
