"""
    sysfs GPIO access: attribute reads, startup validation and the value change stream
"""
from pirwatch.gpio.config import gpio_pin_path, read_gpio_config
from pirwatch.gpio.validator import validate_gpio, validate_pin_identifier
from pirwatch.gpio.value import GpioValueStream

__all__ = ['gpio_pin_path', 'read_gpio_config', 'validate_gpio', 'validate_pin_identifier', 'GpioValueStream']
