import logging
import os
import select
import signal
import sys
from typing import TextIO

from pirwatch.common.pirwatch_logging import set_logging_configuration, get_pirwatch_logger
from pirwatch.common.constants import CTE
from pirwatch.common.exceptions import PirWatchError, UsageError
from pirwatch.gpio import GpioValueStream, validate_gpio
from pirwatch.settings import WatchSettings, build_parser, get_watch_settings
from pirwatch.sinks.factory import create_sink
from pirwatch.watcher import EdgeWatcher

logger: logging.Logger = get_pirwatch_logger(__name__)


def configure_logging(settings: WatchSettings):
    set_logging_configuration(debug=settings.debug,
                              log_level=logging.getLevelName(settings.log_level.upper()),
                              log_path=settings.logging_directory,
                              disable_file_logging=settings.disable_file_logging)


def watch(settings: WatchSettings, stream: TextIO | None = None, poller_factory=select.poll) -> None:
    """
    Validates the pin, opens the value file and the sink and runs the edge wait loop. Only returns by raising,
    every resource is released on the way out.
    """
    validate_gpio(settings.pin, settings.gpio_root)

    with GpioValueStream(settings.pin, settings.gpio_root, poller_factory) as value_stream:
        value_stream.prime()

        with create_sink(settings, stream) as event_sink:
            EdgeWatcher(value_stream, event_sink).run()


def main(argv: list[str] | None = None) -> int:
    # A closed stdout consumer must surface as a write error, not kill the process
    signal.signal(signal.SIGPIPE, signal.SIG_IGN)

    try:
        settings = get_watch_settings(argv)
    except UsageError as ex:
        sys.stderr.write(build_parser().format_usage())
        logger.error(str(ex))
        return ex.exit_code

    configure_logging(settings)

    try:
        watch(settings)
    except PirWatchError as ex:
        logger.error(str(ex))
        return ex.exit_code
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")

    return CTE.EXIT_OK


def run():
    exit_code = main()
    try:
        sys.stdout.flush()
    except BrokenPipeError:
        # Keep the interpreter from failing again on the final stdout flush
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
    sys.exit(exit_code)
