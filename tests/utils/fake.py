#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import errno
import select
import tempfile
from pathlib import Path
from typing import Callable


class FakeGpioTree:
    """
    Temporary directory laid out as the sysfs GPIO tree: <root>/gpio<pin>/{direction,edge,value}
    """

    def __init__(self, pin: str = '17', direction: str = 'in\n', edge: str = 'rising\n', value: str = '0\n'):
        self._tmp = tempfile.TemporaryDirectory()
        self.root: Path = Path(self._tmp.name)
        self.pin: str = pin
        self.pin_path: Path = self.root / f'gpio{pin}'
        self.pin_path.mkdir()
        self.write('direction', direction)
        self.write('edge', edge)
        self.write('value', value)

    def write(self, attribute: str, content: str):
        (self.pin_path / attribute).write_text(content)

    def remove(self, attribute: str):
        (self.pin_path / attribute).unlink()

    def cleanup(self):
        self._tmp.cleanup()


class FakePoller:
    """
    Stands in for select.poll(). Every poll() call runs the next scheduled action (usually a write to the value
    file) and reports a POLLPRI event. Once the actions are exhausted poll() raises OSError.
    """

    def __init__(self, actions: list[Callable[[], None]] | None = None, error_errno: int = errno.EBADF):
        self.actions: list[Callable[[], None]] = list(actions or [])
        self.error_errno: int = error_errno
        self.registered: dict[int, int] = {}
        self.poll_calls: int = 0

    def register(self, fd: int, eventmask: int):
        self.registered[fd] = eventmask

    def unregister(self, fd: int):
        del self.registered[fd]

    def poll(self, timeout=None):
        self.poll_calls += 1
        if not self.actions:
            raise OSError(self.error_errno, 'fake poll failure')
        self.actions.pop(0)()
        return [(fd, select.POLLPRI) for fd in self.registered]


def value_writer(tree: FakeGpioTree, content: str) -> Callable[[], None]:
    return lambda: tree.write('value', content)
