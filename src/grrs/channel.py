"""Closable result channel between the worker pool and the aggregator"""

import queue
import threading
from collections.abc import Iterator

from grrs.errors import ChannelClosedError
from grrs.models import UnitResult


_CLOSED = object()


class ResultChannel:
    """Many producers, one consumer.

    Workers send() UnitResults; the aggregator iterates the channel, blocking
    while it is empty. Iteration ends once close() has been called and every
    result sent before it has been received.
    """

    def __init__(self):
        self._queue: queue.Queue = queue.Queue()
        self._lock = threading.Lock()
        self._closed = False

    def send(self, result: UnitResult) -> None:
        with self._lock:
            if self._closed:
                raise ChannelClosedError('Cannot send on a closed result channel')
            self._queue.put(result)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put(_CLOSED)

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[UnitResult]:
        while True:
            item = self._queue.get()
            if item is _CLOSED:
                return
            yield item
