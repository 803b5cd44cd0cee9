import typing

import autobach.constants


SCALE_DEFINITIONS: typing.Dict[str, typing.Tuple[int, ...]] = {
	"dorian_mode": (0, 2, 3, 5, 7, 9, 10),
	"harmonic_minor": (0, 2, 3, 5, 7, 8, 11),
	"lydian": (0, 2, 4, 6, 7, 9, 11),
	"major_ionian": autobach.constants.C_MAJOR_SCALE,
	"mixolydian": (0, 2, 4, 5, 7, 9, 10),
	"natural_minor": (0, 2, 3, 5, 7, 8, 10),
	"phrygian_mode": (0, 1, 3, 5, 7, 8, 10),
}


def get_scale (name: str) -> typing.Tuple[int, ...]:

	"""
	Return the ascending degree set of a named seven-note scale.
	"""

	if name not in SCALE_DEFINITIONS:
		raise ValueError(f"Unknown scale '{name}'. Available: {sorted(SCALE_DEFINITIONS)}")

	return SCALE_DEFINITIONS[name]


def quantize (
	pitch: int,
	root: int = autobach.constants.DEFAULT_ROOT,
	scale_degrees: typing.Sequence[int] = autobach.constants.C_MAJOR_SCALE
) -> int:

	"""
	Snap a MIDI pitch to the nearest degree of a scale.

	The pitch is split into an octave and a semitone relative to ``root``.
	Degrees are scanned in ascending order and the closest one wins; when two
	degrees are equally close the lower one is kept.  The octave never
	changes, so a semitone just below the next root snaps down rather than up.

	Parameters:
		pitch: MIDI note number to quantize.
		root: MIDI note number of the scale root (default middle C).
		scale_degrees: Ascending semitone offsets of the scale within one octave.

	Returns:
		A MIDI note number that belongs to the scale.

	Example:
		```python
		quantize(61)  # C# → 60 (tie between C and D keeps C)
		quantize(66)  # F# → 65 (tie between F and G keeps F)
		quantize(47)  # B2 is already in C major → 47
		```
	"""

	diff = pitch - root
	octave = diff // 12
	semitone = diff % 12

	best = scale_degrees[0]
	min_distance = 999

	for degree in scale_degrees:
		distance = abs(degree - semitone)
		if distance < min_distance:
			min_distance = distance
			best = degree

	return root + octave * 12 + best


def is_scale_member (
	pitch: int,
	root: int = autobach.constants.DEFAULT_ROOT,
	scale_degrees: typing.Sequence[int] = autobach.constants.C_MAJOR_SCALE
) -> bool:

	"""
	Return True when the pitch class of ``pitch`` is a degree of the scale.
	"""

	return (pitch - root) % 12 in scale_degrees
