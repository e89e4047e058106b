import asyncio
import logging
from asyncio import Future
from collections import deque
from dataclasses import dataclass, field
from typing import Optional


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EventState:
  """
  A snapshot of an event's state.

  Attributes
  ----------
  completed
    Whether the event was set when the snapshot was taken.
  wait_count
    The number of registered waiters that were still pending.
  """

  completed: bool
  wait_count: int


@dataclass(slots=True)
class ManualResetEvent:
  """
  An event that stays set until it is explicitly reset.

  Unlike `asyncio.Event`, waiters are registered as soon as `wait()` is called
  rather than when the returned awaitable is awaited, and resetting the event
  does not discard them: a waiter registered before a reset is still woken up
  by the next call to `set()`. Waiters are woken up in the order they were
  registered.
  """

  name: Optional[str] = None

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

    return EventState(completed=self._set, wait_count=len(self._waiters))

  def set(self):
    """
    Set the event and wake up all registered waiters.
    """

    self._set = True

    if not self._waiters:
      return

    logger.debug(f'Releasing {len(self._waiters)} waiter(s) of {self._label()}')

    while self._waiters:
      waiter = self._waiters.popleft()

      if not waiter.done():
        waiter.set_result(None)

  def reset(self):
    """
    Reset the event.

    Registered waiters are kept and will be woken up by the next call to
    `set()`.
    """

    self._set = False

  def clear(self):
    self.reset()

  def wait(self):
    """
    Register a waiter and return an awaitable that completes once the event is
    set.

    The returned future is already done if the event is currently set, and is
    done as soon as `set()` returns otherwise. Cancelling it does not
    unregister the waiter.

    Returns
    -------
    Future[None]

    Raises
    ------
    RuntimeError
      If there is no running event loop.
    """

    future = asyncio.get_running_loop().create_future()

    if self._set:
      future.set_result(None)
    else:
      self._waiters.append(future)

    return future

  def _label(self):
    return f'event {self.name!r}' if self.name is not None else 'event'


def create_event(name: Optional[str] = None):
  """
  Create a new event, initially unset and without waiters.

  Parameters
  ----------
  name
    An optional label used in log messages.

  Returns
  -------
  ManualResetEvent
  """

  return ManualResetEvent(name)


__all__ = [
  'EventState',
  'ManualResetEvent',
  'create_event',
]
