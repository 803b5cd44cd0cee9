"""Playback session: generate, schedule and log measures in real time.

A :class:`Session` owns the synth, the scheduling cursor and the periodic
measure tick.  Starting from an empty log it schedules two measures at once
and then one more per measure duration, so there is always about two measures
of audio queued ahead of what is currently sounding.  Every scheduled measure
is appended to the :class:`~autobach.window.MeasureLog` for display.

All state changes happen either inside ``start()``/``stop()`` or inside a
single tick callback, on one event loop, so nothing needs a lock.
"""

import enum
import logging
import typing

import autobach.constants
import autobach.event_emitter
import autobach.measure
import autobach.midi_utils
import autobach.periodic
import autobach.synth
import autobach.window


logger = logging.getLogger(__name__)


class SessionState (enum.Enum):

	IDLE = "idle"
	PLAYING = "playing"


class Session:

	"""Drives the endless generate-schedule-append cycle.

	Events emitted on :attr:`events`:

	- ``"start"`` once playback is running.
	- ``"measure"`` with ``(index, measure)`` after each append.
	- ``"stop"`` after the tick is cancelled and notes are released.

	Example:
		```python
		session = Session(autobach.synth.MidiSynth(), composer=MeasureComposer(seed=1))
		session.init()
		await session.start()
		...
		session.stop()
		session.teardown()
		```
	"""

	def __init__ (
		self,
		synth: autobach.synth.Synth,
		composer: typing.Optional[autobach.measure.MeasureComposer] = None,
		log: typing.Optional[autobach.window.MeasureLog] = None
	) -> None:

		"""Wire the session to its collaborators.

		Parameters:
			synth: Sound source that receives timed note triggers.
			composer: Measure generator. Defaults to an unseeded composer.
			log: Measure log to append to. Defaults to a new empty log.
		"""

		self.synth = synth
		self.composer = composer if composer is not None else autobach.measure.MeasureComposer()
		self.log = log if log is not None else autobach.window.MeasureLog()
		self.events = autobach.event_emitter.EventEmitter()

		self.state = SessionState.IDLE
		self.cursor = 0.0
		self.tick: typing.Optional[autobach.periodic.PeriodicTask] = None

		# Bumped by every start() and stop(); a start() whose number is stale
		# after the readiness wait was superseded and must not arm a tick.
		self._generation = 0

	@property
	def playing (self) -> bool:

		return self.state is SessionState.PLAYING

	def init (self) -> None:

		"""Align the scheduling cursor with the synth clock."""

		self.cursor = self.synth.now()
		self.state = SessionState.IDLE

	def teardown (self) -> None:

		"""Stop playback if needed and release the synth."""

		self.stop()
		self.synth.close()

	async def start (self) -> None:

		"""Begin playback. Does nothing when already playing.

		Waits for the synth to become ready before anything is scheduled.  If
		``stop()`` is called during that wait, nothing is scheduled; if
		``start()`` is then called again, only that later call arms the tick.
		"""

		if self.playing:
			logger.debug("start() ignored: already playing")
			return

		self.state = SessionState.PLAYING
		self._generation += 1
		generation = self._generation

		await self.synth.start()

		if not self.playing or generation != self._generation:
			logger.info("Start superseded before the synth became ready")
			return

		if len(self.log) == 0:
			first = self.composer.compose()
			second = self.composer.compose(first)

			for measure in (first, second):
				self._schedule_next(measure)

		if self.tick is not None:
			self.tick.cancel()

		self.tick = autobach.periodic.PeriodicTask(
			autobach.constants.MEASURE_SECONDS,
			self.on_tick,
			name = "measure-tick"
		)
		self.tick.start()

		logger.info(f"Playback started at {self.synth.now():.3f}s, cursor {self.cursor:.3f}s")

		self.events.emit("start")

	def stop (self) -> None:

		"""Stop playback. Does nothing when already idle.

		The log is left untouched; the cursor is moved to the synth's current
		time and every sounding note is released.
		"""

		if not self.playing:
			logger.debug("stop() ignored: not playing")
			return

		self.state = SessionState.IDLE
		self._generation += 1

		if self.tick is not None:
			self.tick.cancel()
			self.tick = None

		self.cursor = self.synth.now()
		self.synth.release_all()

		logger.info(f"Playback stopped after {len(self.log)} measures")

		self.events.emit("stop")

	def on_tick (self) -> None:

		"""Compose one measure continuing from the log's tail and schedule it."""

		if not self.playing:
			return

		measure = self.composer.compose(self.log.tail())
		self._schedule_next(measure)

	def schedule_measure (self, measure: autobach.measure.Measure, start_time: float) -> typing.List[float]:

		"""Send one trigger per note of ``measure`` and return the onsets used.

		The note at index ``i`` of a voice starts at
		``start_time + i * beats_per_note * seconds_per_beat``.
		"""

		onsets: typing.List[float] = []

		for role, notes in measure.voices():

			note_seconds = role.beats_per_note * autobach.constants.SECONDS_PER_BEAT

			for i, note in enumerate(notes):
				onset = start_time + i * note_seconds
				self.synth.trigger_note_event(
					autobach.midi_utils.pitch_to_frequency(note.pitch),
					autobach.constants.NOTE_LENGTH_SECONDS,
					onset
				)
				onsets.append(onset)

		return onsets

	def _schedule_next (self, measure: autobach.measure.Measure) -> None:

		"""Schedule at the cursor, advance it by one measure and log the measure."""

		now = self.synth.now()

		if self.cursor < now:
			logger.warning(f"Scheduling cursor {self.cursor:.3f}s is behind the synth clock ({now:.3f}s) - catching up")
			self.cursor = now

		start_time = self.cursor
		self.schedule_measure(measure, start_time)
		self.cursor += autobach.constants.MEASURE_SECONDS

		index = self.log.append(measure)

		logger.debug(f"Scheduled measure {index} to start at {start_time:.3f}s")

		self.events.emit("measure", index, measure)
