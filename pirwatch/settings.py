import logging

from argparse import ArgumentParser, Namespace
from typing import Optional

import toml
from pydantic import Field, ValidationError, field_validator

from pirwatch.common.constants import CTE
from pirwatch.common.exceptions import UsageError
from pirwatch.common.pirwatch_logging import get_pirwatch_logger
from pirwatch.common.settings_parser import PirWatchBaseSettings
from pirwatch.common.utils import is_numeric
from pirwatch.sinks import SinkType
from pirwatch.sinks.redis_publisher import RemotePublishTarget

USAGE = '%(prog)s [options] <gpio pin> [<redis server> <port> <channel> <message>]'
LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

logger: logging.Logger = get_pirwatch_logger(__name__)


class WatchSettings(PirWatchBaseSettings):
    """
    WatchSettings holds the whole configuration of a pirwatch run. It is assembled once at startup from, in
    increasing priority, a toml file, the environment and the command line, and it is not modified afterwards.

    Attributes:
        pin (str): GPIO pin number, as exported in the GPIO sysfs tree.
        sink (SinkType): How motion is reported. Default value is timestamp.
        redis_server (Optional[str]): Redis host to publish motion events to.
        redis_port (Optional[int]): Redis port.
        redis_channel (Optional[str]): Pub/sub channel the message is published on.
        redis_message (Optional[str]): Message published per motion event.
        gpio_root (str): Root of the GPIO sysfs tree. Default value is /sys/class/gpio.
        log_level (str): Log level. Default value is "INFO".
        debug (bool): Forces DEBUG log level.
        logging_directory (Optional[str]): Directory for the per module log files.
        disable_file_logging (bool): Disables the log files. Default value is True.
    """
    pin: str = Field('', alias='PIRWATCH_PIN')
    sink: SinkType = Field(SinkType.TIMESTAMP, alias='PIRWATCH_SINK')

    # Remote publish target, all or none
    redis_server: Optional[str] = Field(None, alias='PIRWATCH_REDIS_SERVER')
    redis_port: Optional[int] = Field(None, alias='PIRWATCH_REDIS_PORT')
    redis_channel: Optional[str] = Field(None, alias='PIRWATCH_REDIS_CHANNEL')
    redis_message: Optional[str] = Field(None, alias='PIRWATCH_REDIS_MESSAGE')

    gpio_root: str = Field(CTE.GPIO_SYSFS_ROOT, alias='PIRWATCH_GPIO_ROOT')

    # Logging
    log_level: str = Field('INFO', alias='PIRWATCH_LOG_LEVEL')
    debug: bool = Field(False, alias='PIRWATCH_DEBUG')
    logging_directory: Optional[str] = Field(None, alias='PIRWATCH_LOGGING_DIRECTORY')
    disable_file_logging: bool = Field(True, alias='PIRWATCH_DISABLE_FILE_LOGGING')

    @field_validator('pin', 'redis_channel', 'redis_message', mode='before')
    def cast_number_to_str(cls, v):
        # toml files may hold pin = 17
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def remote_values(self) -> list:
        return [self.redis_server, self.redis_port, self.redis_channel, self.redis_message]

    @property
    def publish_target(self) -> RemotePublishTarget | None:
        if any(v is None for v in self.remote_values):
            return None
        return RemotePublishTarget(server=self.redis_server,
                                   port=self.redis_port,
                                   channel=self.redis_channel,
                                   message=self.redis_message)

    def check(self) -> None:
        """
        Raises UsageError if the pin is missing or the remote publish target is only partially provided
        """
        if not self.pin:
            raise UsageError("GPIO pin not provided")

        provided = [v is not None for v in self.remote_values]
        if any(provided) and not all(provided):
            raise UsageError("Redis server, port, channel and message must be provided together")

        if self.log_level.upper() not in LOG_LEVELS:
            raise UsageError(f"Unknown log level. ({self.log_level})")


class _ArgumentParser(ArgumentParser):
    def error(self, message):
        raise UsageError(message)


def build_parser(prog: str | None = None) -> ArgumentParser:
    parser: ArgumentParser = _ArgumentParser(prog=prog,
                                             usage=USAGE,
                                             description="Reports motion pulses of a PIR sensor wired to a GPIO pin")
    parser.add_argument('pin', nargs='?', default=None,
                        help='GPIO pin number, exported as a rising edge input')
    parser.add_argument('remote', nargs='*', metavar='redis',
                        help='Redis server, port, channel and message to publish on motion, all or none')
    parser.add_argument('-s', '--sink', dest='sink',
                        choices=[str(s) for s in SinkType],
                        default=None, help='How motion is reported')
    parser.add_argument('-c', '--config', dest='config', default=None,
                        help='toml settings file')
    parser.add_argument('--gpio-root', dest='gpio_root', default=None,
                        help=f'GPIO sysfs root (default: {CTE.GPIO_SYSFS_ROOT})')
    parser.add_argument('-l', '--log-level', dest='log_level',
                        choices=LOG_LEVELS,
                        default=None, help='Log level')
    parser.add_argument('-d', '--debug', dest='debug',
                        action='store_true',
                        help='Set log level to debug')
    return parser


def parse_cmd_line_args(argv: list[str] | None = None) -> Namespace:
    return build_parser().parse_args(argv)


def get_cmd_line_overrides(cmd_settings: Namespace) -> dict[str, any]:
    """
    Translates the parsed command line into WatchSettings keyword arguments. Only the values actually given are
    returned so they override environment and file settings.

    Raises:
        UsageError: partial remote arguments or non numeric port
    """
    overrides: dict[str, any] = {}

    if cmd_settings.pin is not None:
        overrides['pin'] = cmd_settings.pin

    if cmd_settings.remote:
        if len(cmd_settings.remote) != 4:
            raise UsageError("Redis server, port, channel and message must be provided together")

        server, port, channel, message = cmd_settings.remote
        if not is_numeric(port):
            raise UsageError(f"Redis port not numeric. ({port})")

        overrides.update(redis_server=server,
                         redis_port=int(port),
                         redis_channel=channel,
                         redis_message=message)

    if cmd_settings.sink:
        overrides['sink'] = cmd_settings.sink

    if cmd_settings.gpio_root:
        overrides['gpio_root'] = cmd_settings.gpio_root

    if cmd_settings.log_level:
        overrides['log_level'] = cmd_settings.log_level

    if cmd_settings.debug:
        overrides['debug'] = True

    return overrides


def get_watch_settings(argv: list[str] | None = None) -> WatchSettings:
    cmd_settings: Namespace = parse_cmd_line_args(argv)
    overrides = get_cmd_line_overrides(cmd_settings)

    try:
        if cmd_settings.config:
            settings = WatchSettings.from_toml(cmd_settings.config, **overrides)
        else:
            settings = WatchSettings(**overrides)
    except FileNotFoundError as ex:
        raise UsageError(f"Settings file not found. ({ex})") from ex
    except ValidationError as ex:
        raise UsageError(f"Invalid settings. ({ex.error_count()} errors: {ex.errors()[0]['msg']})") from ex
    except toml.TomlDecodeError as ex:
        raise UsageError(f"Invalid settings file. ({ex})") from ex

    settings.check()
    logger.debug(f"Settings: {settings.model_dump()}")
    return settings
