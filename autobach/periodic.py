"""Drift-free periodic callbacks on the asyncio event loop.

A :class:`PeriodicTask` owns one background task that calls a plain callback
every ``interval`` seconds until it is cancelled.  Deadlines are computed by
adding the interval to the previous deadline rather than to the time the
callback finished, so a slow callback or a late wakeup never shifts later
ticks.
"""

import asyncio
import logging
import typing


logger = logging.getLogger(__name__)


class PeriodicTask:

	"""Repeatedly run a synchronous callback at a fixed interval.

	The first call happens one full interval after :meth:`start`.  Exceptions
	raised by the callback are logged and the task keeps running.

	Example:
		```python
		task = PeriodicTask(2.0, on_tick, name="measure-tick")
		task.start()
		...
		task.cancel()
		```
	"""

	def __init__ (self, interval: float, callback: typing.Callable[[], typing.Any], name: str = "periodic") -> None:

		"""Store the interval and callback; nothing runs until :meth:`start`."""

		if interval <= 0:
			raise ValueError("Interval must be positive")

		self.interval = interval
		self.callback = callback
		self.name = name
		self.fire_count = 0
		self._task: typing.Optional[asyncio.Task] = None

	@property
	def running (self) -> bool:

		"""True while the background task is alive."""

		return self._task is not None and not self._task.done()

	def start (self) -> None:

		"""Start ticking on the running event loop. A second call is a no-op."""

		if self.running:
			return

		self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)

	def cancel (self) -> None:

		"""Stop ticking. Safe to call when not running."""

		if self._task is not None:
			self._task.cancel()
			self._task = None

	async def _run (self) -> None:

		loop = asyncio.get_running_loop()
		next_fire = loop.time() + self.interval

		while True:

			delay = next_fire - loop.time()

			if delay > 0:
				await asyncio.sleep(delay)

			self.fire_count += 1

			try:
				self.callback()
			except Exception:
				logger.exception(f"Periodic task {self.name!r} callback failed")

			next_fire += self.interval

			# Yield once per tick even when running behind.
			if delay <= 0:
				await asyncio.sleep(0)
