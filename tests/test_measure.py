import random

import pytest

import autobach.intervals
import autobach.measure
import autobach.voice


def test_compose_without_previous_has_fixed_shape () -> None:

	"""A fresh measure has 4 low, 4 mid and 8 melody notes."""

	measure = autobach.measure.MeasureComposer(seed=1).compose()

	assert len(measure.low) == 4
	assert len(measure.mid) == 4
	assert len(measure.melody) == 8


def test_compose_pitches_on_scale () -> None:

	"""Every composed pitch belongs to C major."""

	composer = autobach.measure.MeasureComposer(seed=9)
	measure = None

	for _ in range(50):
		measure = composer.compose(measure)

		for role, notes in measure.voices():
			assert all(autobach.intervals.is_scale_member(note.pitch) for note in notes)


def test_compose_first_measure_starts_near_anchors () -> None:

	"""Without a previous measure each voice's first pitch is one step from its anchor."""

	measure = autobach.measure.MeasureComposer(seed=3).compose()

	for role in autobach.voice.ROLES:
		first = measure.voice(role)[0].pitch
		candidates = {
			autobach.intervals.quantize(role.anchor + role.step),
			autobach.intervals.quantize(role.anchor - role.step),
		}
		assert first in candidates


def test_compose_continues_from_previous_tail () -> None:

	"""Each voice's first pitch is one step from the same voice's last pitch in the previous measure."""

	composer = autobach.measure.MeasureComposer(seed=11)
	previous = composer.compose()

	for _ in range(20):
		current = composer.compose(previous)

		for role in autobach.voice.ROLES:
			tail = previous.tail(role)
			low, high = role.register
			candidates = {
				autobach.intervals.quantize(max(low, min(high, tail + role.step))),
				autobach.intervals.quantize(max(low, min(high, tail - role.step))),
			}
			assert current.voice(role)[0].pitch in candidates

		previous = current


def test_compose_is_reproducible_with_seed () -> None:

	"""Two composers with the same seed produce the same measures."""

	a = autobach.measure.MeasureComposer(seed=42)
	b = autobach.measure.MeasureComposer(seed=42)

	ma = a.compose()
	mb = b.compose()

	assert ma == mb
	assert a.compose(ma) == b.compose(mb)


def test_composer_uses_injected_rng () -> None:

	"""An injected random source takes precedence over a seed."""

	rng = random.Random(7)
	composer = autobach.measure.MeasureComposer(rng=rng, seed=999)

	assert composer.rng is rng
	assert composer.compose() == autobach.measure.MeasureComposer(rng=random.Random(7)).compose()


def test_measure_rejects_wrong_note_counts () -> None:

	"""A measure with a short voice cannot be built."""

	with pytest.raises(ValueError, match="melody"):
		autobach.measure.Measure.from_pitches([60] * 4, [60] * 4, [72] * 7)


def test_measure_accessors () -> None:

	"""Named voices, tails and pitch lists are exposed by role."""

	measure = autobach.measure.Measure.from_pitches(
		[48, 50, 52, 53],
		[60, 62, 64, 65],
		[72, 74, 76, 77, 79, 81, 83, 84]
	)

	assert measure.tail(autobach.voice.LOW) == 53
	assert measure.tail(autobach.voice.MELODY) == 84
	assert measure.pitches(autobach.voice.MID) == [60, 62, 64, 65]
	assert [role.name for role, _ in measure.voices()] == ["low", "mid", "melody"]


def test_measure_is_immutable () -> None:

	"""Measures are frozen once built."""

	measure = autobach.measure.MeasureComposer(seed=0).compose()

	with pytest.raises(AttributeError):
		measure.low = ()  # type: ignore[misc]
