import asyncio
import logging
import os
import signal
import typing

import yaml

import autobach.display
import autobach.intervals
import autobach.keystroke
import autobach.measure
import autobach.notation
import autobach.session
import autobach.synth


logger = logging.getLogger(__name__)


def load_config (config_path: str = 'config.yaml') -> dict:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		return yaml.safe_load(f) or {}


def build_session (config: dict) -> autobach.session.Session:

	"""
	Create a session with the MIDI synth and composer described by ``config``.
	"""

	midi = config.get('midi', {})
	session_config = config.get('session', {})

	synth = autobach.synth.MidiSynth(
		device_name = midi.get('device_name'),
		channel = midi.get('channel', 0),
		velocity = midi.get('velocity', 90)
	)

	composer = autobach.measure.MeasureComposer(
		seed = session_config.get('seed'),
		scale_degrees = autobach.intervals.get_scale(session_config.get('scale', 'major_ionian'))
	)

	return autobach.session.Session(synth, composer=composer)


def write_score (session: autobach.session.Session, path: str, window: int, measure_width: float) -> None:

	"""
	Rewrite the SVG score file with the current render window.
	"""

	view = session.log.render_window(window, measure_width)
	commands = autobach.notation.render_view(view, measure_width)
	width = autobach.notation.score_width(len(view.measures), measure_width)
	svg = autobach.notation.SvgBackend().draw(commands, width)

	try:
		with open(path, 'w') as f:
			f.write(svg)
	except OSError as e:
		logger.error(f"Failed to write score to {path}: {e}")


async def run (config: dict) -> None:

	"""
	Run a session until quit is requested from the keyboard or a signal.
	"""

	display_config = config.get('display', {})
	notation_config = config.get('notation', {})
	window = display_config.get('window', 4)

	session = build_session(config)
	session.init()

	display: typing.Optional[autobach.display.Display] = None

	if display_config.get('enabled', True):
		display = autobach.display.Display(session, window=window)
		display.start()

	svg_path = notation_config.get('svg_path')

	if svg_path:
		measure_width = notation_config.get('measure_width', 220)
		session.events.on('measure', lambda *_: write_score(session, svg_path, window, measure_width))

	quit_event = asyncio.Event()
	loop = asyncio.get_running_loop()

	for sig in (signal.SIGINT, signal.SIGTERM):
		loop.add_signal_handler(sig, quit_event.set)

	listener = autobach.keystroke.KeystrokeListener({
		's': session.start,
		'x': session.stop,
		'q': quit_event.set,
	})
	listener.start(loop)

	logger.info("Keys: [s] start  [x] stop  [q] quit")

	if config.get('session', {}).get('autostart', True):
		await session.start()

	try:
		await quit_event.wait()
	finally:
		listener.stop()
		session.teardown()

		if display is not None:
			display.stop()


def main () -> None:

	"""
	Main entry point for the autobach application.
	"""

	config = load_config(os.environ.get('AUTOBACH_CONFIG', 'config.yaml'))

	level = config.get('logging', {}).get('level', 'INFO')
	logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO))

	logger.info("AutoBach starting...")

	try:
		asyncio.run(run(config))
	except KeyboardInterrupt:
		pass


if __name__ == "__main__":
	main()
