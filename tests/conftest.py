import typing

import mido
import pytest


class FakeMidiOut:

	"""MIDI output stub that keeps every message it is sent."""

	def __init__ (self) -> None:

		self.sent: typing.List[mido.Message] = []
		self.closed = False

	def send (self, message: mido.Message) -> None:

		"""Record an outgoing MIDI message."""

		self.sent.append(message)


	def close (self) -> None:

		"""Mark the fake device closed."""

		self.closed = True


# Module-level reference so tests can inspect the most recently opened output.
_current_fake_output: typing.Optional[FakeMidiOut] = None


def _fake_get_output_names () -> typing.List[str]:

	"""Return a fixed list of MIDI output names for tests."""

	return ["Dummy MIDI"]


def _fake_open_output (name: str) -> FakeMidiOut:

	"""Return a fake MIDI output regardless of the name."""

	global _current_fake_output
	_current_fake_output = FakeMidiOut()
	return _current_fake_output


@pytest.fixture
def patch_midi (monkeypatch: pytest.MonkeyPatch) -> None:

	"""Patch mido to use a fake MIDI output."""

	monkeypatch.setattr(mido, "get_output_names", _fake_get_output_names)
	monkeypatch.setattr(mido, "open_output", _fake_open_output)


@pytest.fixture
def fake_output (patch_midi: None) -> typing.Callable[[], typing.Optional[FakeMidiOut]]:

	"""Accessor for the fake output opened during the test."""

	return lambda: _current_fake_output


class FakeSynth:

	"""Synth stub with a hand-driven clock that records every call."""

	def __init__ (self, now: float = 0.0) -> None:

		self.time = now
		self.start_calls = 0
		self.release_calls = 0
		self.closed = False
		self.triggers: typing.List[typing.Tuple[float, float, float]] = []

	def now (self) -> float:

		return self.time

	async def start (self) -> None:

		self.start_calls += 1

	def trigger_note_event (self, frequency_hz: float, duration: float, start_time: float) -> None:

		self.triggers.append((frequency_hz, duration, start_time))

	def release_all (self) -> None:

		self.release_calls += 1

	def close (self) -> None:

		self.closed = True


@pytest.fixture
def fake_synth () -> FakeSynth:

	"""A fresh fake synth with its clock at 10 seconds."""

	return FakeSynth(now=10.0)
