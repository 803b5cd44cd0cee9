"""Constrained random-walk generation of single voice lines.

Each voice walks from the previous measure's last pitch (or a fixed anchor
when there is none) in fixed-size steps.  A step is clamped into the voice
register *before* it is snapped to the scale, and the walk continues from
the snapped value.  Snapping can therefore push a pitch slightly outside the
register; that slack is kept as-is.
"""

import dataclasses
import random
import typing

import autobach.constants
import autobach.intervals


@dataclasses.dataclass(frozen=True)
class VoiceRole:

	"""
	Fixed parameters of one of the three voices in a measure.
	"""

	name: str
	count: int
	beats_per_note: float
	register: typing.Tuple[int, int]
	step: int
	anchor: int
	duration: str


LOW = VoiceRole(
	name = "low",
	count = 4,
	beats_per_note = autobach.constants.QUARTER_NOTE_BEATS,
	register = (36, 60),
	step = 2,
	anchor = 60,
	duration = "q"
)

MID = VoiceRole(
	name = "mid",
	count = 4,
	beats_per_note = autobach.constants.QUARTER_NOTE_BEATS,
	register = (48, 72),
	step = 2,
	anchor = 60,
	duration = "q"
)

MELODY = VoiceRole(
	name = "melody",
	count = 8,
	beats_per_note = autobach.constants.EIGHTH_NOTE_BEATS,
	register = (60, 84),
	step = 1,
	anchor = 72,
	duration = "8"
)

# Measure field order.
ROLES: typing.Tuple[VoiceRole, ...] = (LOW, MID, MELODY)
ROLES_BY_NAME: typing.Dict[str, VoiceRole] = {role.name: role for role in ROLES}


def clamp (value: int, register: typing.Tuple[int, int]) -> int:

	"""Clamp a pitch into an inclusive ``(min, max)`` register."""

	low, high = register
	return max(low, min(high, value))


def generate_voice (
	previous_tail: typing.Optional[int],
	register: typing.Tuple[int, int],
	step: int,
	count: int,
	rng: random.Random,
	anchor: int = 60,
	root: int = autobach.constants.DEFAULT_ROOT,
	scale_degrees: typing.Sequence[int] = autobach.constants.C_MAJOR_SCALE
) -> typing.List[int]:

	"""Walk ``count`` scale-snapped pitches from the previous tail.

	Parameters:
		previous_tail: Last pitch of the same voice in the previous measure,
			or ``None`` to start from ``anchor``.
		register: Inclusive ``(min, max)`` clamp applied before snapping.
		step: Semitones moved per step, up or down with equal probability.
		count: Number of pitches to return.
		rng: Random source; one ``rng.random()`` draw per step.
		anchor: Starting pitch when there is no previous tail.
		root: Scale root passed to the quantizer.
		scale_degrees: Scale passed to the quantizer.

	Example:
		```python
		rng = random.Random(7)
		pitches = generate_voice(None, (60, 84), step=1, count=8, rng=rng, anchor=72)
		```
	"""

	if count <= 0:
		return []

	if register[0] > register[1]:
		raise ValueError(f"Register min ({register[0]}) must be <= max ({register[1]})")

	current = previous_tail if previous_tail is not None else anchor
	pitches: typing.List[int] = []

	for _ in range(count):
		direction = 1 if rng.random() < 0.5 else -1
		candidate = clamp(current + direction * step, register)
		current = autobach.intervals.quantize(candidate, root, scale_degrees)
		pitches.append(current)

	return pitches


def generate_role (
	role: VoiceRole,
	previous_tail: typing.Optional[int],
	rng: random.Random,
	root: int = autobach.constants.DEFAULT_ROOT,
	scale_degrees: typing.Sequence[int] = autobach.constants.C_MAJOR_SCALE
) -> typing.List[int]:

	"""Generate one voice line using a role's fixed register, step, count and anchor."""

	return generate_voice(
		previous_tail,
		register = role.register,
		step = role.step,
		count = role.count,
		rng = rng,
		anchor = role.anchor,
		root = root,
		scale_degrees = scale_degrees
	)
