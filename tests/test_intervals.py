import pytest

import autobach.constants
import autobach.intervals


def test_quantize_on_scale_pitches_unchanged () -> None:

	"""Pitches already in C major should come back unchanged."""

	for pitch in [36, 38, 40, 41, 43, 45, 47, 48, 60, 62, 64, 65, 67, 69, 71, 72, 84]:
		assert autobach.intervals.quantize(pitch) == pitch


def test_quantize_ties_resolve_to_lower_degree () -> None:

	"""A black key halfway between two degrees should snap down."""

	assert autobach.intervals.quantize(61) == 60  # C#
	assert autobach.intervals.quantize(63) == 62  # D#
	assert autobach.intervals.quantize(66) == 65  # F#
	assert autobach.intervals.quantize(68) == 67  # G#
	assert autobach.intervals.quantize(70) == 69  # A#


def test_quantize_below_root () -> None:

	"""Pitches below the root should use the floored octave."""

	assert autobach.intervals.quantize(59) == 59  # B3
	assert autobach.intervals.quantize(58) == 57  # A#3 → A3
	assert autobach.intervals.quantize(37) == 36  # C#2 → C2


def test_quantize_properties_over_wide_range () -> None:

	"""Every result is a scale member, within 11 semitones, and a fixed point."""

	for pitch in range(-30, 160):
		snapped = autobach.intervals.quantize(pitch)

		assert autobach.intervals.is_scale_member(snapped)
		assert abs(snapped - pitch) <= 11
		assert autobach.intervals.quantize(snapped) == snapped


def test_quantize_custom_root_and_scale () -> None:

	"""A minor scale rooted on A should snap within that scale."""

	a_minor = autobach.intervals.get_scale("natural_minor")

	assert autobach.intervals.quantize(69, root=69, scale_degrees=a_minor) == 69
	assert autobach.intervals.quantize(70, root=69, scale_degrees=a_minor) == 69
	assert autobach.intervals.quantize(73, root=69, scale_degrees=a_minor) == 72


def test_quantize_never_wraps_to_next_octave () -> None:

	"""The octave is kept even when the next root would be closer."""

	# In a scale without a degree 11, semitone 11 snaps down to 10.
	mixolydian = autobach.intervals.get_scale("mixolydian")

	assert autobach.intervals.quantize(71, scale_degrees=mixolydian) == 70


def test_is_scale_member () -> None:

	"""Membership depends on pitch class relative to the root."""

	assert autobach.intervals.is_scale_member(60)
	assert autobach.intervals.is_scale_member(47)
	assert not autobach.intervals.is_scale_member(61)
	assert not autobach.intervals.is_scale_member(54)


def test_get_scale_major_matches_default () -> None:

	"""The named major scale is the default C major degree set."""

	assert autobach.intervals.get_scale("major_ionian") == autobach.constants.C_MAJOR_SCALE


def test_get_scale_unknown_name () -> None:

	"""Unknown scale names should raise ValueError."""

	with pytest.raises(ValueError, match="Unknown scale"):
		autobach.intervals.get_scale("not_a_scale")
