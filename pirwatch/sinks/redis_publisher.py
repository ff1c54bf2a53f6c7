"""
    Publishes a message on a Redis pub/sub channel for every motion pulse
"""
import logging
from typing import Callable, TextIO

import redis
from pydantic import BaseModel
from redis.backoff import NoBackoff
from redis.exceptions import RedisError
from redis.retry import Retry

from pirwatch.common.constants import CTE
from pirwatch.common.exceptions import PublishError, RemoteConnectionError
from pirwatch.common.pirwatch_logging import get_pirwatch_logger
from pirwatch.sinks import SinkType, sink
from pirwatch.sinks.console import TimestampSink

logger: logging.Logger = get_pirwatch_logger(__name__)

ClientFactory = Callable[..., redis.Redis]


class RemotePublishTarget(BaseModel, frozen=True):
    server: str
    port: int = CTE.REDIS_DEFAULT_PORT
    channel: str
    message: str


@sink(SinkType.REDIS)
class RedisPublishSink(TimestampSink):
    """
    Publishes the configured message on the configured channel, then prints the timestamp line.

    The connection is established once in open(). A failed PUBLISH is fatal and never retried.
    """

    def __init__(self,
                 target: RemotePublishTarget,
                 stream: TextIO | None = None,
                 client_factory: ClientFactory | None = None):
        super().__init__(stream)
        self.target: RemotePublishTarget = target
        self._client_factory: ClientFactory = client_factory or redis.Redis
        self.client: redis.Redis | None = None

    @property
    def is_connected(self) -> bool:
        return self.client is not None

    def open(self) -> 'RedisPublishSink':
        logger.info(f"Connecting to Redis at {self.target.server}:{self.target.port}...")
        try:
            self.client = self._client_factory(host=self.target.server,
                                               port=self.target.port,
                                               socket_connect_timeout=CTE.NETWORK_TIMEOUT,
                                               retry=Retry(NoBackoff(), 0))
            self.client.ping()
        except RedisError as ex:
            self._release()
            raise RemoteConnectionError(f"Unable to connect to Redis. ({ex})") from ex
        logger.info("Connecting to Redis... Success")
        return self

    def on_motion(self) -> None:
        try:
            receivers = self.client.publish(self.target.channel, self.target.message)
        except RedisError as ex:
            raise PublishError(f"Failed to send PUBLISH command to Redis. ({ex})") from ex
        logger.debug(f"Published to {self.target.channel}, {receivers} receivers")

        super().on_motion()

    def _release(self):
        if self.client is not None:
            self.client.close()
            self.client = None

    def close(self) -> None:
        self._release()
        logger.debug("Redis connection released")
