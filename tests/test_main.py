import io
import logging
import signal
import unittest

from mock import MagicMock, Mock, patch

import pirwatch
from pirwatch import main, watch
from pirwatch.common.pirwatch_logging import set_logging_configuration
from pirwatch.common.exceptions import GpioWaitError, GpioPreconditionError, InvalidPinError, RemoteConnectionError
from pirwatch.settings import WatchSettings
from tests.utils.fake import FakeGpioTree, FakePoller, value_writer


class TestWatch(unittest.TestCase):

    def setUp(self):
        self.env = patch.dict('os.environ', {}, clear=True)
        self.env.start()
        self.tree = FakeGpioTree(pin='17', value='0\n')
        self.poller = FakePoller()
        self.out = io.StringIO()

    def tearDown(self):
        self.tree.cleanup()
        self.env.stop()

    def settings(self, **kwargs) -> WatchSettings:
        return WatchSettings(pin='17', gpio_root=str(self.tree.root), **kwargs)

    def run_watch(self, settings: WatchSettings):
        watch(settings, stream=self.out, poller_factory=lambda: self.poller)

    def test_dot_sink(self):
        self.poller.actions = [value_writer(self.tree, v) for v in ['1\n', '0\n', '1\n']]

        with self.assertRaises(GpioWaitError):
            self.run_watch(self.settings(sink='dot'))

        self.assertEqual('..\n', self.out.getvalue())
        self.assertEqual({}, self.poller.registered)

    @patch('pirwatch.sinks.console.time.time')
    def test_timestamp_sink(self, mock_time):
        mock_time.return_value = 1478000000
        self.poller.actions = [value_writer(self.tree, '1\n')]

        with self.assertRaises(GpioWaitError):
            self.run_watch(self.settings())

        self.assertEqual('1478000000 motion detected\n\n', self.out.getvalue())

    def test_validation_before_open(self):
        self.tree.write('direction', 'out\n')
        poller_factory = Mock()

        with self.assertRaises(GpioPreconditionError):
            watch(self.settings(), stream=self.out, poller_factory=poller_factory)

        poller_factory.assert_not_called()
        self.assertEqual('', self.out.getvalue())

    @patch('pirwatch.sinks.redis_publisher.redis.Redis')
    def test_redis_connection_failure_releases_value(self, mock_redis):
        from redis.exceptions import ConnectionError as RedisConnectionError
        mock_redis.return_value.ping.side_effect = RedisConnectionError('refused')

        with self.assertRaises(RemoteConnectionError):
            self.run_watch(self.settings(redis_server='localhost', redis_port=6379,
                                         redis_channel='motion', redis_message='1'))

        self.assertEqual({}, self.poller.registered)
        self.assertEqual(0, self.poller.poll_calls)


class TestMain(unittest.TestCase):

    def setUp(self):
        self.env = patch.dict('os.environ', {}, clear=True)
        self.env.start()

    def tearDown(self):
        self.env.stop()

    @patch('pirwatch.configure_logging')
    @patch('pirwatch.watch')
    @patch('pirwatch.signal.signal')
    def test_ignores_sigpipe(self, mock_signal, mock_watch, mock_logging):
        mock_watch.side_effect = GpioWaitError('Failed to poll for GPIO value. (Bad file descriptor)')
        main(['17'])
        mock_signal.assert_called_once_with(signal.SIGPIPE, signal.SIG_IGN)

    @patch('pirwatch.signal.signal')
    @patch('pirwatch.watch')
    @patch('pirwatch.sys.stderr', new_callable=io.StringIO)
    def test_usage_errors(self, mock_stderr, mock_watch, mock_signal):
        for argv in [[], ['17', 'localhost'], ['17', 'localhost', '6379'], ['17', 'localhost', '6379', 'chan']]:
            self.assertEqual(1, main(argv))
        mock_watch.assert_not_called()
        self.assertIn('usage:', mock_stderr.getvalue())

    @patch('pirwatch.signal.signal')
    @patch('pirwatch.configure_logging')
    @patch('pirwatch.watch')
    def test_arguments_accepted(self, mock_watch, mock_logging, mock_signal):
        mock_watch.side_effect = KeyboardInterrupt
        self.assertEqual(0, main(['17']))
        self.assertEqual(0, main(['17', 'localhost', '6379', 'chan', '1']))
        self.assertEqual(2, mock_watch.call_count)

    @patch('pirwatch.signal.signal')
    @patch('pirwatch.watch')
    def test_log_level_applied_to_package_logger(self, mock_watch, mock_signal):
        mock_watch.side_effect = KeyboardInterrupt
        try:
            self.assertEqual(0, main(['-l', 'ERROR', '17']))
            self.assertEqual(logging.ERROR, pirwatch.logger.getEffectiveLevel())
            self.assertEqual(logging.ERROR, pirwatch.logger.handlers[0].level)

            self.assertEqual(0, main(['-d', '17']))
            self.assertEqual(logging.DEBUG, pirwatch.logger.getEffectiveLevel())
        finally:
            set_logging_configuration(False, log_level=logging.INFO)

    @patch('pirwatch.signal.signal')
    @patch('pirwatch.configure_logging')
    @patch('pirwatch.validate_gpio')
    @patch('pirwatch.GpioValueStream')
    def test_non_numeric_pin(self, mock_stream, mock_validate, mock_logging, mock_signal):
        mock_validate.side_effect = InvalidPinError('GPIO pin not numeric. (x)')
        self.assertEqual(1, main(['x']))
        mock_stream.assert_not_called()

    @patch('pirwatch.signal.signal')
    @patch('pirwatch.configure_logging')
    @patch('pirwatch.logger')
    def test_fatal_errors_exit_1(self, mock_logger, mock_logging, mock_signal):
        tree = FakeGpioTree(pin='17', edge='none\n')
        try:
            self.assertEqual(1, main(['--gpio-root', str(tree.root), '17']))
        finally:
            tree.cleanup()
        mock_logger.error.assert_called_once_with('GPIO pin is not set to detect rising edges. (n)')

    @patch('pirwatch.signal.signal')
    @patch('pirwatch.configure_logging')
    @patch('pirwatch.logger')
    def test_publish_failure_exits_1(self, mock_logger, mock_logging, mock_signal):
        from redis.exceptions import ConnectionError as RedisConnectionError

        tree = FakeGpioTree(pin='17')
        poller = FakePoller([value_writer(tree, '1\n'), value_writer(tree, '1\n')])
        mock_client = MagicMock()
        mock_client.publish.side_effect = RedisConnectionError('Connection reset by peer')

        real_watch = pirwatch.watch

        def fake_watch(settings):
            real_watch(settings, stream=io.StringIO(), poller_factory=lambda: poller)

        try:
            with patch('pirwatch.watch', side_effect=fake_watch), \
                    patch('pirwatch.sinks.redis_publisher.redis.Redis', return_value=mock_client) as mock_redis:
                exit_code = main(['--gpio-root', str(tree.root), '17', 'localhost', '6379', 'motion', '1'])
        finally:
            tree.cleanup()

        self.assertEqual(1, exit_code)
        mock_redis.assert_called_once()
        mock_client.publish.assert_called_once_with('motion', '1')
        mock_logger.error.assert_called_once_with(
            'Failed to send PUBLISH command to Redis. (Connection reset by peer)')

    @patch('pirwatch.sys.exit')
    @patch('pirwatch.main')
    def test_run(self, mock_main, mock_exit):
        mock_main.return_value = 1
        pirwatch.run()
        mock_exit.assert_called_once_with(1)
