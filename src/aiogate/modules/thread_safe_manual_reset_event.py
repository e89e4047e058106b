import asyncio
import logging
from asyncio import Future
from collections import deque
from dataclasses import dataclass, field
from threading import Lock
from typing import Optional

from .manual_reset_event import EventState


logger = logging.getLogger(__name__)


def _wakeup_waiter(waiter: Future[None], /):
  if not waiter.done():
    waiter.set_result(None)


@dataclass(slots=True)
class ThreadsafeManualResetEvent:
  """
  A thread-safe variant of `ManualResetEvent`.

  Waiters may be registered from event loops running in different threads.
  Each waiter is woken up on its own loop, and waiters of a given loop are woken
  up in the order they were registered.
  """

  name: Optional[str] = None

  _lock: Lock = field(default_factory=Lock, init=False, repr=False)
  _set: bool = field(default=False, init=False, repr=False)
  _waiters: deque[Future[None]] = field(default_factory=deque, init=False, repr=False)

  def is_set(self):
    return self._set

  def get_state(self):
    """
    Return a snapshot of the event's state.

    Returns
    -------
    EventState
    """

    with self._lock:
      return EventState(completed=self._set, wait_count=len(self._waiters))

  def set(self):
    """
    Set the event and wake up all registered waiters.

    This method may be called from any thread.
    """

    with self._lock:
      self._set = True

      if self._waiters:
        logger.debug(f'Releasing {len(self._waiters)} waiter(s) of {self._label()}')

      for waiter in self._waiters:
        try:
          waiter.get_loop().call_soon_threadsafe(_wakeup_waiter, waiter)
        except RuntimeError:
          logger.debug(f'Dropping waiter of {self._label()} whose loop is closed')

      self._waiters.clear()

  def reset(self):
    """
    Reset the event, keeping registered waiters.
    """

    with self._lock:
      self._set = False

  def clear(self):
    self.reset()

  def wait(self):
    """
    Register a waiter on the running loop and return an awaitable that
    completes once the event is set.

    Returns
    -------
    Future[None]

    Raises
    ------
    RuntimeError
      If there is no running event loop.
    """

    future = asyncio.get_running_loop().create_future()

    with self._lock:
      if self._set:
        future.set_result(None)
        return future

      self._waiters.append(future)

    return future

  def _label(self):
    return f'event {self.name!r}' if self.name is not None else 'event'


def create_threadsafe_event(name: Optional[str] = None):
  return ThreadsafeManualResetEvent(name)


__all__ = [
  'ThreadsafeManualResetEvent',
  'create_threadsafe_event',
]
