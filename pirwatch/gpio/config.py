"""
    Reads the per pin configuration attributes exposed by the GPIO sysfs interface
"""
import logging
from pathlib import Path

from pirwatch.common.constants import CTE
from pirwatch.common.pirwatch_logging import get_pirwatch_logger
from pirwatch.common.utils import describe_os_error

logger: logging.Logger = get_pirwatch_logger(__name__)


def gpio_pin_path(pin: str, gpio_root: str | Path = CTE.GPIO_SYSFS_ROOT) -> Path:
    return Path(gpio_root) / f"gpio{pin}"


def read_gpio_config(pin: str, attribute: str, gpio_root: str | Path = CTE.GPIO_SYSFS_ROOT) -> str | None:
    """
    Reads the first character of a GPIO attribute file, i.e. /sys/class/gpio/gpio17/direction

    Args:
        pin: GPIO pin number, as text
        attribute: attribute file name (direction, edge)
        gpio_root: root of the GPIO sysfs tree

    Returns:
        The first character of the attribute, None if the file cannot be opened, read or is empty
    """
    config_file = gpio_pin_path(pin, gpio_root) / attribute

    try:
        f = config_file.open('rb')
    except OSError as ex:
        logger.error(f"Unable to open GPIO {attribute} config. ({describe_os_error(ex)})")
        return None

    with f:
        try:
            value = f.read(1)
        except OSError as ex:
            logger.error(f"Failed to read GPIO {attribute} config. ({describe_os_error(ex)})")
            return None

    if not value:
        logger.error(f"Failed to read GPIO {attribute} config. (No data)")
        return None

    return value.decode(errors='replace')
