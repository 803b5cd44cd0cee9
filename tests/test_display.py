import logging

import pytest

import autobach.display
import autobach.measure
import autobach.session

from conftest import FakeSynth


def _session_with_measures (count: int) -> autobach.session.Session:

	"""Create an idle session whose log already holds ``count`` fixed measures."""

	session = autobach.session.Session(FakeSynth())

	for i in range(count):
		session.log.append(autobach.measure.Measure.from_pitches(
			[48, 50, 52, 53],
			[60, 62, 64, 65],
			[72, 74, 76, 77, 79, 81, 83, 84 - (i % 2)]
		))

	return session


def test_format_status_idle () -> None:

	"""The status line shows tempo, state and the measure count."""

	display = autobach.display.Display(_session_with_measures(3))

	assert display.format_status() == "120.00 BPM  Idle  Measures: 3"


def test_format_lines_lists_last_window () -> None:

	"""Only the last measures are listed, numbered by their log index."""

	display = autobach.display.Display(_session_with_measures(6), window=4)
	lines = display.format_lines()

	headers = [line for line in lines if line.startswith("Measure")]

	assert headers == ["Measure 2:", "Measure 3:", "Measure 4:", "Measure 5:"]
	assert lines[-1].endswith("Measures: 6")
	assert len(lines) == 4 * 4 + 1


def test_format_lines_note_names () -> None:

	"""Each voice is listed with its duration and note names."""

	display = autobach.display.Display(_session_with_measures(1))
	lines = display.format_lines()

	assert lines[1] == "  low    (q)  C3 D3 E3 F3"
	assert lines[2] == "  mid    (q)  C4 D4 E4 F4"
	assert lines[3] == "  melody (8)  C5 D5 E5 F5 G5 A5 B5 C6"


def test_format_lines_empty_log () -> None:

	"""With no measures only the status line is shown."""

	display = autobach.display.Display(_session_with_measures(0))

	assert display.format_lines() == ["120.00 BPM  Idle  Measures: 0"]


def test_window_must_be_positive () -> None:

	"""A zero window size raises ValueError."""

	with pytest.raises(ValueError):
		autobach.display.Display(_session_with_measures(0), window=0)


def test_start_and_stop_swap_log_handlers () -> None:

	"""start() installs the display handler and stop() restores the originals."""

	root_logger = logging.getLogger()
	original = list(root_logger.handlers)

	display = autobach.display.Display(_session_with_measures(2))
	display.start()

	try:
		assert len(root_logger.handlers) == 1
		assert isinstance(root_logger.handlers[0], autobach.display.DisplayLogHandler)
	finally:
		display.stop()

	assert root_logger.handlers == original


def test_update_draws_to_stderr (capsys: pytest.CaptureFixture[str]) -> None:

	"""A measure event redraws the listing on stderr."""

	session = _session_with_measures(1)
	display = autobach.display.Display(session)
	display.start()

	try:
		session.events.emit("measure", 0, session.log[0])
		err = capsys.readouterr().err
	finally:
		display.stop()

	assert "Measure 0:" in err
	assert "Measures: 1" in err


def test_update_inactive_is_silent (capsys: pytest.CaptureFixture[str]) -> None:

	"""Events before start() draw nothing."""

	session = _session_with_measures(1)
	autobach.display.Display(session)

	session.events.emit("measure", 0, session.log[0])

	assert capsys.readouterr().err == ""


def test_redraw_and_clear_return_to_first_line (capsys: pytest.CaptureFixture[str]) -> None:

	"""A redraw moves back over the previous listing and clear leaves the cursor on its first line."""

	session = _session_with_measures(1)
	display = autobach.display.Display(session)
	display.start()
	capsys.readouterr()

	try:
		display.draw()
		redraw = capsys.readouterr().err

		display.clear()
		cleared = capsys.readouterr().err
	finally:
		display.stop()

	# One measure heading, three voices and the status line.
	assert redraw.startswith("\033[4A\r\033[KMeasure 0:")
	assert redraw.count("\n") == 4
	assert cleared == "\033[4A" + "\n".join(["\r\033[K"] * 5) + "\033[4A"
