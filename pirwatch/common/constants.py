from dataclasses import dataclass


@dataclass(frozen=True)
class Constants:
    # Host System Paths
    GPIO_SYSFS_ROOT: str = "/sys/class/gpio"

    # GPIO attributes and expected first characters
    GPIO_DIRECTION_ATTR: str = "direction"
    GPIO_EDGE_ATTR: str = "edge"
    GPIO_VALUE_ATTR: str = "value"
    GPIO_INPUT_DIRECTION: str = "i"
    GPIO_RISING_EDGES: tuple[str, ...] = ("r", "b")
    GPIO_HIGH: str = "1"

    # Bytes read per call while draining the value file
    DRAIN_CHUNK_SIZE: int = 64

    # Timeouts
    NETWORK_TIMEOUT: int = 10

    # Redis
    REDIS_DEFAULT_PORT: int = 6379

    # Exit codes
    EXIT_OK: int = 0
    EXIT_FAILURE: int = 1


CTE: Constants = Constants()
