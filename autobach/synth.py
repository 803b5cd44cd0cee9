import asyncio
import dataclasses
import heapq
import itertools
import logging
import time
import typing

import mido

import autobach.constants
import autobach.midi_utils


logger = logging.getLogger(__name__)


@typing.runtime_checkable
class Synth (typing.Protocol):

	"""
	What the session needs from a sound source.

	Times are absolute seconds on the synth's own clock, as returned by
	:meth:`now`.  ``trigger_note_event`` is fire-and-forget: the synth owns the
	timing of the sound from then on.
	"""

	def now (self) -> float:

		"""Current reading of the synth clock in seconds."""

		...

	async def start (self) -> None:

		"""Complete once audio output is permitted."""

		...

	def trigger_note_event (self, frequency_hz: float, duration: float, start_time: float) -> None:

		"""Sound a note of ``duration`` seconds beginning at ``start_time``."""

		...

	def release_all (self) -> None:

		"""Immediately silence every sounding note."""

		...

	def close (self) -> None:

		"""Release the underlying audio resources."""

		...


@dataclasses.dataclass(order=True)
class NoteEvent:

	"""
	A MIDI note message waiting for its time on the synth clock.

	Note-offs sort ahead of note-ons at the same instant so a repeated pitch
	is released before it is struck again.
	"""

	time: float
	priority: int
	sequence: int
	message_type: str = dataclasses.field(compare=False)
	note: int = dataclasses.field(compare=False)


class MidiSynth:

	"""Synth that plays timed notes on a MIDI output port via ``mido``.

	Notes handed to :meth:`trigger_note_event` are queued and sent by a
	dispatch task on the event loop when their time arrives.  Frequencies are
	rounded to the nearest MIDI note.  When no output device can be opened
	the synth still runs and keeps time, it just produces no sound.
	"""

	def __init__ (
		self,
		device_name: typing.Optional[str] = None,
		channel: int = autobach.constants.DEFAULT_MIDI_CHANNEL,
		velocity: int = autobach.constants.DEFAULT_VELOCITY
	) -> None:

		"""Prepare the synth. The port is opened by :meth:`start`.

		Parameters:
			device_name: MIDI output port name. When omitted the first
				available port is used.
			channel: MIDI channel (0-15) for all notes.
			velocity: Note-on velocity (1-127).
		"""

		if not 0 <= channel <= 15:
			raise ValueError(f"MIDI channel must be 0-15, got {channel}")

		if not 1 <= velocity <= 127:
			raise ValueError(f"Velocity must be 1-127, got {velocity}")

		self.device_name = device_name
		self.channel = channel
		self.velocity = velocity
		self.midi_out: typing.Any = None
		self.ready = False

		self.event_queue: typing.List[NoteEvent] = []
		self.active_notes: typing.Set[int] = set()
		self._sequence = itertools.count()
		self._epoch = time.perf_counter()
		self._wake: typing.Optional[asyncio.Event] = None
		self._task: typing.Optional[asyncio.Task] = None

	def now (self) -> float:

		"""Seconds elapsed since the synth was created."""

		return time.perf_counter() - self._epoch

	async def start (self) -> None:

		"""Open the output port and start the dispatch task."""

		if self.ready:
			return

		device_name, midi_out = autobach.midi_utils.select_output_device(self.device_name)

		if device_name:
			self.device_name = device_name
			self.midi_out = midi_out
		else:
			logger.error("No MIDI output available - playback will be silent")

		self._wake = asyncio.Event()
		self._task = asyncio.get_running_loop().create_task(self._dispatch_loop(), name="midi-dispatch")
		self.ready = True

	def trigger_note_event (self, frequency_hz: float, duration: float, start_time: float) -> None:

		"""Queue a note-on at ``start_time`` and its note-off ``duration`` seconds later."""

		note = autobach.midi_utils.frequency_to_pitch(frequency_hz)

		heapq.heappush(self.event_queue, NoteEvent(start_time, 1, next(self._sequence), 'note_on', note))
		heapq.heappush(self.event_queue, NoteEvent(start_time + duration, 0, next(self._sequence), 'note_off', note))

		if self._wake is not None:
			self._wake.set()

	def release_all (self) -> None:

		"""Drop queued notes and send note-off for everything that is sounding."""

		logger.info(f"Release all: {len(self.active_notes)} sounding, {len(self.event_queue)} queued events dropped")

		self.event_queue.clear()

		for note in sorted(self.active_notes):
			self._send('note_off', note)

		self.active_notes.clear()

		if self.midi_out:
			try:
				# All Notes Off
				self.midi_out.send(mido.Message('control_change', channel=self.channel, control=123, value=0))
			except Exception:
				logger.exception("MIDI all-notes-off failed (device may be disconnected)")

	def close (self) -> None:

		"""Stop dispatching, silence everything and close the port."""

		if self._task is not None:
			self._task.cancel()
			self._task = None

		self.release_all()

		if self.midi_out:
			self.midi_out.close()
			self.midi_out = None

		self.ready = False

	def process_due (self, now: typing.Optional[float] = None) -> int:

		"""Send every queued event whose time is at or before ``now``; return how many were sent.

		Late events are sent immediately.
		"""

		if now is None:
			now = self.now()

		sent = 0

		while self.event_queue and self.event_queue[0].time <= now:

			event = heapq.heappop(self.event_queue)

			if event.message_type == 'note_on':
				self.active_notes.add(event.note)
			else:
				self.active_notes.discard(event.note)

			self._send(event.message_type, event.note)
			sent += 1

		return sent

	async def _dispatch_loop (self) -> None:

		assert self._wake is not None, "Dispatch loop needs the wake event from start()"

		while True:

			self.process_due()
			self._wake.clear()

			if self.event_queue:
				timeout: typing.Optional[float] = max(0.0, self.event_queue[0].time - self.now())
			else:
				timeout = None

			try:
				await asyncio.wait_for(self._wake.wait(), timeout=timeout)
			except asyncio.TimeoutError:
				pass

	def _send (self, message_type: str, note: int) -> None:

		if not self.midi_out:
			return

		velocity = self.velocity if message_type == 'note_on' else 0

		try:
			self.midi_out.send(mido.Message(message_type, channel=self.channel, note=note, velocity=velocity))
		except Exception:
			logger.exception("MIDI send failed (device may be disconnected)")
