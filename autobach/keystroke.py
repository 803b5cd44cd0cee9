"""Single-keystroke start/stop controls for the terminal.

A background thread puts stdin into cbreak mode and forwards each keypress
to the event loop, where it is mapped to an action.  The display writes to
stderr and this module reads from stdin, so the two do not interfere.

POSIX only (``tty``/``termios``) and only when stdin is a TTY.  Elsewhere
:meth:`KeystrokeListener.start` logs a warning and the program runs without
keyboard control.
"""

import asyncio
import logging
import select
import sys
import threading
import typing


logger = logging.getLogger(__name__)


def keystrokes_supported () -> typing.Tuple[bool, typing.Optional[str]]:

	"""Return ``(supported, reason)``; ``reason`` explains why when not supported."""

	try:
		import termios  # noqa: PLC0415

		if not sys.stdin.isatty():
			return False, "stdin is not a TTY (running in a pipe or non-interactive context)"

		termios.tcgetattr(sys.stdin.fileno())

	except ImportError:
		return False, "The 'tty' and 'termios' modules are not available on this platform."

	except OSError as e:
		return False, f"Cannot read terminal settings: {e}"

	return True, None


class KeystrokeListener:

	"""Maps single keypresses to callbacks on the event loop.

	Example::

		listener = KeystrokeListener({"s": start, "x": stop})
		listener.start(asyncio.get_running_loop())
		...
		listener.stop()
	"""

	def __init__ (self, bindings: typing.Dict[str, typing.Callable[[], typing.Any]]) -> None:

		"""Store the key bindings; keys are single characters."""

		for key in bindings:
			if len(key) != 1:
				raise ValueError(f"Key bindings must be single characters, got {key!r}")

		self.bindings = dict(bindings)
		self.active: bool = False
		self._loop: typing.Optional[asyncio.AbstractEventLoop] = None
		self._thread: typing.Optional[threading.Thread] = None
		self._tasks: typing.Set[asyncio.Task] = set()

	def start (self, loop: asyncio.AbstractEventLoop) -> None:

		"""Start listening. A second call while running is a no-op."""

		if self.active:
			return

		supported, reason = keystrokes_supported()

		if not supported:
			logger.warning(f"Keyboard controls are not available and will be disabled. {reason}")
			return

		self.active = True
		self._loop = loop
		self._thread = threading.Thread(target=self._listen, name="autobach-keystroke-listener", daemon=True)
		self._thread.start()

	def stop (self) -> None:

		"""Ask the listener thread to exit; it restores the terminal itself."""

		self.active = False

	def dispatch (self, key: str) -> None:

		"""Run the callback bound to ``key``; unbound keys are ignored."""

		callback = self.bindings.get(key.lower())

		if callback is None:
			return

		result = callback()

		if asyncio.iscoroutine(result):
			task = asyncio.get_running_loop().create_task(result)
			self._tasks.add(task)
			task.add_done_callback(self._task_done)

	def _task_done (self, task: asyncio.Task) -> None:

		self._tasks.discard(task)

		if not task.cancelled() and task.exception() is not None:
			logger.error("Key action failed", exc_info=task.exception())

	def _listen (self) -> None:

		import termios  # noqa: PLC0415
		import tty      # noqa: PLC0415

		assert self._loop is not None, "Listener needs an event loop from start()"

		fd = sys.stdin.fileno()
		old_settings = termios.tcgetattr(fd)

		try:
			# cbreak keeps Ctrl+C working, unlike raw mode.
			tty.setcbreak(fd)

			while self.active:
				ready, _, _ = select.select([sys.stdin], [], [], 0.1)
				if ready:
					char = sys.stdin.read(1)
					if char:
						self._loop.call_soon_threadsafe(self.dispatch, char)

		except Exception:
			logger.exception("Keystroke listener stopped unexpectedly")

		finally:
			termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
			self.active = False
