import asyncio
import logging
import typing


logger = logging.getLogger(__name__)

CallbackType = typing.Callable[..., typing.Any]


class EventEmitter:

	"""
	Named-event notifications for session listeners.

	``emit`` never blocks the caller: plain callbacks run immediately and
	coroutine callbacks are started as background tasks on the running loop.
	A failing listener is logged and does not stop the others.
	"""

	def __init__ (self) -> None:

		self._listeners: typing.Dict[str, typing.List[CallbackType]] = {}
		self._tasks: typing.Set[asyncio.Task] = set()


	def on (self, event_name: str, callback: CallbackType) -> None:

		"""
		Register a callback for an event name.
		"""

		self._listeners.setdefault(event_name, []).append(callback)


	def off (self, event_name: str, callback: CallbackType) -> None:

		"""
		Unregister a previously registered callback.

		Raises ``ValueError`` if the callback is not registered for the event.
		"""

		if callback not in self._listeners.get(event_name, []):
			raise ValueError(f"Callback not registered for event {event_name!r}")

		self._listeners[event_name].remove(callback)


	def emit (self, event_name: str, *args: typing.Any, **kwargs: typing.Any) -> None:

		"""
		Notify every listener of ``event_name`` without waiting on async ones.
		"""

		for callback in list(self._listeners.get(event_name, [])):

			try:
				result = callback(*args, **kwargs)

			except Exception:
				logger.exception(f"Listener for {event_name!r} failed")
				continue

			if asyncio.iscoroutine(result):

				try:
					loop = asyncio.get_running_loop()

				except RuntimeError:
					result.close()
					logger.warning(f"Async listener for {event_name!r} skipped: no running event loop")
					continue

				task = loop.create_task(result)
				self._tasks.add(task)
				task.add_done_callback(self._tasks.discard)
