"""Live terminal listing of the most recent measures.

Shows the pitches of the last few measures in the log, one line per voice,
above a status line with the tempo, transport state and measure count::

	Measure 9:
	  low    (q)  C3 D3 C3 B2
	  mid    (q)  E4 D4 E4 F4
	  melody (8)  G5 A5 G5 F5 E5 F5 G5 A5
	120.00 BPM  Playing  Measures: 10

The region is redrawn in place on stderr after every new measure.  Log
messages scroll above it without disruption.
"""

import logging
import sys
import typing

import autobach.constants
import autobach.midi_utils

if typing.TYPE_CHECKING:
	from autobach.session import Session


_LABEL_WIDTH = 6


class DisplayLogHandler (logging.Handler):

	"""Logging handler that clears and redraws the display around log output.

	Installed by ``Display.start()`` and removed by ``Display.stop()``.
	"""

	def __init__ (self, display: "Display") -> None:

		super().__init__()
		self._display = display

	def emit (self, record: logging.LogRecord) -> None:

		"""Clear the display, write the log message, then redraw."""

		try:
			self._display.clear()

			msg = self.format(record)
			sys.stderr.write(msg + "\n")
			sys.stderr.flush()

			self._display.draw()

		except Exception:
			self.handleError(record)


class Display:

	"""Terminal view of a session's display window.

	Example:
		```python
		display = Display(session, window=4)
		display.start()
		```
	"""

	def __init__ (self, session: "Session", window: int = autobach.constants.DEFAULT_WINDOW_SIZE) -> None:

		"""Subscribe to session events.

		Parameters:
			session: The session whose log is listed.
			window: Number of recent measures to list.
		"""

		if window <= 0:
			raise ValueError(f"Window size must be positive, got {window}")

		self._session = session
		self._window = window
		self._active: bool = False
		self._handler: typing.Optional[DisplayLogHandler] = None
		self._saved_handlers: typing.List[logging.Handler] = []
		self._lines: typing.List[str] = []
		self._drawn_line_count: int = 0

		session.events.on("measure", self.update)
		session.events.on("start", self.update)
		session.events.on("stop", self.update)

	def start (self) -> None:

		"""Install the log handler and activate the display.

		Existing root logger handlers are saved and restored by ``stop()``.
		"""

		if self._active:
			return

		self._active = True

		root_logger = logging.getLogger()
		self._saved_handlers = list(root_logger.handlers)
		self._handler = DisplayLogHandler(self)

		if self._saved_handlers and self._saved_handlers[0].formatter:
			self._handler.setFormatter(self._saved_handlers[0].formatter)
		else:
			self._handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))

		root_logger.handlers.clear()
		root_logger.addHandler(self._handler)

		self.update()

	def stop (self) -> None:

		"""Clear the display and restore original log handlers."""

		if not self._active:
			return

		self.clear()
		self._active = False

		root_logger = logging.getLogger()
		root_logger.handlers.clear()

		for handler in self._saved_handlers:
			root_logger.addHandler(handler)

		self._saved_handlers = []
		self._handler = None

	def update (self, *_: typing.Any) -> None:

		"""Rebuild the listing from the log and redraw. Event arguments are ignored."""

		if not self._active:
			return

		self._lines = self.format_lines()
		self.draw()

	def format_lines (self) -> typing.List[str]:

		"""Build the listing and status lines from the current session state."""

		lines: typing.List[str] = []

		for index, measure in self._session.log.display_window(self._window):

			lines.append(f"Measure {index}:")

			for role, notes in measure.voices():
				names = " ".join(autobach.midi_utils.pitch_to_name(note.pitch) for note in notes)
				lines.append(f"  {role.name.ljust(_LABEL_WIDTH)} ({role.duration})  {names}")

		lines.append(self.format_status())

		return lines

	def format_status (self) -> str:

		"""Status line: tempo, transport state and measure count."""

		state = "Playing" if self._session.playing else "Idle"

		return f"{autobach.constants.TEMPO_BPM:.2f} BPM  {state}  Measures: {len(self._session.log)}"

	def draw (self) -> None:

		"""Write the current lines to the terminal, replacing the previous draw."""

		if not self._active or not self._lines:
			return

		self._return_to_top()

		# Last line has no trailing newline so the cursor stays on it.
		sys.stderr.write("\n".join(f"\r\033[K{line}" for line in self._lines))
		sys.stderr.flush()

		self._drawn_line_count = len(self._lines)

	def clear (self) -> None:

		"""Erase the drawn region from the terminal."""

		if not self._active:
			return

		lines = max(self._drawn_line_count, 1)

		self._return_to_top()
		sys.stderr.write("\n".join("\r\033[K" for _ in range(lines)))
		self._return_to_top(lines)
		sys.stderr.flush()

		self._drawn_line_count = 0

	def _return_to_top (self, line_count: typing.Optional[int] = None) -> None:

		"""Move the cursor from the last line of a listing back to its first line."""

		if line_count is None:
			line_count = self._drawn_line_count

		if line_count > 1:
			sys.stderr.write(f"\033[{line_count - 1}A")
