from pirwatch.common.constants import CTE


class PirWatchError(Exception):
    """ Base error for every condition that stops pirwatch. Carries the process exit code. """
    exit_code: int = CTE.EXIT_FAILURE


class UsageError(PirWatchError):
    """ Wrong number of arguments or malformed argument values. Raised before any resource is held. """
    ...


class InvalidPinError(UsageError):
    """ The GPIO pin identifier is not made of decimal digits only. """
    ...


class GpioPreconditionError(PirWatchError):
    """ The pin is not configured as a rising edge input. """
    ...


class GpioNotExportedError(GpioPreconditionError):
    """ The pin directory is missing from the GPIO sysfs tree. """
    ...


class GpioResourceError(PirWatchError):
    """ Opening or reading the GPIO value file failed. """
    ...


class GpioWaitError(PirWatchError):
    """ The wait for a value change notification failed. """
    ...


class RemoteConnectionError(PirWatchError):
    """ The Redis connection could not be established. """
    ...


class PublishError(PirWatchError):
    """ A PUBLISH command could not be issued. It is never retried. """
    ...
