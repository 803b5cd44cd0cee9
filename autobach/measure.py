import dataclasses
import logging
import random
import typing

import autobach.constants
import autobach.voice


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Note:

	"""
	A single pitch. Its duration is implied by the voice it belongs to.
	"""

	pitch: int


@dataclasses.dataclass(frozen=True)
class Measure:

	"""
	One 4/4 measure holding the three fixed voices.

	``low`` and ``mid`` hold four quarter notes each; ``melody`` holds eight
	eighth notes.
	"""

	low: typing.Tuple[Note, ...]
	mid: typing.Tuple[Note, ...]
	melody: typing.Tuple[Note, ...]

	def __post_init__ (self) -> None:

		"""Reject voices whose note count does not match their role."""

		for role in autobach.voice.ROLES:
			notes = getattr(self, role.name)
			if len(notes) != role.count:
				raise ValueError(f"Voice '{role.name}' needs {role.count} notes, got {len(notes)}")

	@classmethod
	def from_pitches (
		cls,
		low: typing.Sequence[int],
		mid: typing.Sequence[int],
		melody: typing.Sequence[int]
	) -> "Measure":

		"""Build a measure from plain pitch lists."""

		return cls(
			low = tuple(Note(p) for p in low),
			mid = tuple(Note(p) for p in mid),
			melody = tuple(Note(p) for p in melody)
		)

	def voice (self, role: autobach.voice.VoiceRole) -> typing.Tuple[Note, ...]:

		"""Return the notes of one role."""

		return typing.cast(typing.Tuple[Note, ...], getattr(self, role.name))

	def voices (self) -> typing.Iterator[typing.Tuple[autobach.voice.VoiceRole, typing.Tuple[Note, ...]]]:

		"""Iterate ``(role, notes)`` pairs in ``low``, ``mid``, ``melody`` order."""

		for role in autobach.voice.ROLES:
			yield role, self.voice(role)

	def tail (self, role: autobach.voice.VoiceRole) -> int:

		"""Return the last pitch of a role; the next measure continues from it."""

		return self.voice(role)[-1].pitch

	def pitches (self, role: autobach.voice.VoiceRole) -> typing.List[int]:

		"""Return the pitches of one role."""

		return [note.pitch for note in self.voice(role)]


class MeasureComposer:

	"""Builds measures that continue each voice from the previous measure's last note.

	The previous measure's tail pitches are the only state carried from one
	measure to the next.  The random source is injectable so that a given
	seed always yields the same stream of measures.

	Example:
		```python
		composer = MeasureComposer(seed=42)
		first = composer.compose()
		second = composer.compose(first)
		```
	"""

	def __init__ (
		self,
		rng: typing.Optional[random.Random] = None,
		seed: typing.Optional[int] = None,
		root: int = autobach.constants.DEFAULT_ROOT,
		scale_degrees: typing.Sequence[int] = autobach.constants.C_MAJOR_SCALE
	) -> None:

		"""Store the random source and scale.

		Parameters:
			rng: Random source to draw step directions from. Takes precedence
				over ``seed``.
			seed: Seed for a new ``random.Random`` when ``rng`` is omitted.
			root: Scale root passed through to the quantizer.
			scale_degrees: Scale passed through to the quantizer.
		"""

		self.rng = rng if rng is not None else random.Random(seed)
		self.root = root
		self.scale_degrees = tuple(scale_degrees)

	def compose (self, previous: typing.Optional[Measure] = None) -> Measure:

		"""Compose one measure, seeding each voice from ``previous`` when given."""

		lines: typing.Dict[str, typing.List[int]] = {}

		for role in autobach.voice.ROLES:
			tail = previous.tail(role) if previous is not None else None
			lines[role.name] = autobach.voice.generate_role(
				role,
				tail,
				self.rng,
				root = self.root,
				scale_degrees = self.scale_degrees
			)

		measure = Measure.from_pitches(**lines)

		logger.debug(f"Composed measure: low={lines['low']} mid={lines['mid']} melody={lines['melody']}")

		return measure
