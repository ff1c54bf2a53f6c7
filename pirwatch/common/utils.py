import os
import string


def is_numeric(value: str) -> bool:
    """
    Checks that a command line value is made only of ASCII decimal digits
    :param value: string to check
    :return: True if value is non-empty and all digits
    """
    return bool(value) and all(c in string.digits for c in value)


def describe_os_error(ex: OSError) -> str:
    """
    Returns the system error text of an OSError, falling back to its string form
    :param ex: the raised OSError
    :return: error description
    """
    if ex.errno is not None:
        return os.strerror(ex.errno)
    return str(ex)
