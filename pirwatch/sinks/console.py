"""
    Sinks printing to standard output
"""
import time

from pirwatch.sinks import EventSink, SinkType, sink


@sink(SinkType.DOT)
class DotSink(EventSink):
    """ Prints a single dot per motion pulse, for live feedback on a terminal """

    def on_motion(self) -> None:
        self.write('.')

    def close(self) -> None:
        self.write('\n')


@sink(SinkType.TIMESTAMP)
class TimestampSink(EventSink):
    """ Prints `<unix time> motion detected` per motion pulse """

    def on_motion(self) -> None:
        self.write(f"{int(time.time())} motion detected\n")

    def close(self) -> None:
        self.write('\n')
