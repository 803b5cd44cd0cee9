"""Staff notation as a list of draw commands.

:func:`render_measures` is a pure function: it turns measures and a measure
width into :class:`Translate`, :class:`DrawStave` and :class:`DrawNote`
commands and never touches a drawing surface.  A backend turns commands into
output; :class:`SvgBackend` produces an SVG document.

All three voices share a single treble staff per measure.  Measures are laid
out at their absolute log position and the whole group is shifted left by
the scroll offset, so the visible window always starts at the left edge.
"""

import dataclasses
import typing
import xml.etree.ElementTree

import autobach.constants
import autobach.measure
import autobach.midi_utils
import autobach.window


STAVE_Y = 50
STAVE_MARGIN = 10
LINE_SPACING = 10
SVG_HEIGHT = 250
EXTRA_WIDTH = 50

# Diatonic step of each pitch class (sharps sit on the step below).
_LETTER_STEPS = [0, 0, 1, 1, 2, 3, 3, 4, 4, 5, 5, 6]

# Treble clef bottom line is E4.
_BOTTOM_LINE_STEP = 4 * 7 + 2


@dataclasses.dataclass(frozen=True)
class Translate:

	"""Shift everything that follows horizontally by ``dx``."""

	dx: float


@dataclasses.dataclass(frozen=True)
class DrawStave:

	"""Five-line treble staff for one measure."""

	x: float
	y: float
	width: float
	clef: str = "treble"


@dataclasses.dataclass(frozen=True)
class DrawNote:

	"""One note head (with stem) on a staff."""

	x: float
	y: float
	key: str
	duration: str
	voice: str
	pitch: int


DrawCommand = typing.Union[Translate, DrawStave, DrawNote]


def pitch_to_key (pitch: int) -> str:

	"""Staff key for a pitch, e.g. 60 → ``"C/4"``, 61 → ``"C#/4"``."""

	name = autobach.midi_utils.NOTE_NAMES[pitch % 12]
	return f"{name}/{pitch // 12 - 1}"


def staff_y (pitch: int, stave_y: float = STAVE_Y) -> float:

	"""Vertical position of a note head; each diatonic step is half a line apart."""

	step = (pitch // 12 - 1) * 7 + _LETTER_STEPS[pitch % 12]
	bottom_line_y = stave_y + 4 * LINE_SPACING

	return bottom_line_y - (step - _BOTTOM_LINE_STEP) * LINE_SPACING / 2


def render_measures (
	measures: typing.Sequence[autobach.measure.Measure],
	measure_width: float = autobach.constants.DEFAULT_MEASURE_WIDTH,
	first_index: int = 0,
	scroll_offset: float = 0.0
) -> typing.List[DrawCommand]:

	"""Lay out measures as draw commands.

	Parameters:
		measures: Measures to draw, oldest first.
		measure_width: Horizontal space given to each measure.
		first_index: Log index of ``measures[0]``; sets its absolute x position.
		scroll_offset: Amount the whole score is shifted left.
	"""

	commands: typing.List[DrawCommand] = [Translate(-scroll_offset)]
	usable = measure_width - 2 * STAVE_MARGIN

	for i, measure in enumerate(measures):

		x = (first_index + i) * measure_width + STAVE_MARGIN
		commands.append(DrawStave(x, STAVE_Y, measure_width - STAVE_MARGIN))

		for role, notes in measure.voices():
			for j, note in enumerate(notes):
				beat = j * role.beats_per_note
				commands.append(DrawNote(
					x = x + STAVE_MARGIN + beat / autobach.constants.BEATS_PER_MEASURE * usable,
					y = staff_y(note.pitch),
					key = pitch_to_key(note.pitch),
					duration = role.duration,
					voice = role.name,
					pitch = note.pitch
				))

	return commands


def render_view (
	view: autobach.window.RenderView,
	measure_width: float = autobach.constants.DEFAULT_MEASURE_WIDTH
) -> typing.List[DrawCommand]:

	"""Draw commands for a :class:`~autobach.window.RenderView`."""

	return render_measures(view.measures, measure_width, view.first_index, view.scroll_offset)


class Backend (typing.Protocol):

	def draw (self, commands: typing.Sequence[DrawCommand], width: float, height: float) -> typing.Any:
		...


class SvgBackend:

	"""Draws commands into an SVG document string."""

	def __init__ (self, note_color: str = "#000", background: str = "#fff") -> None:

		self.note_color = note_color
		self.background = background

	def draw (self, commands: typing.Sequence[DrawCommand], width: float, height: float = SVG_HEIGHT) -> str:

		"""Return the SVG markup for ``commands`` on a ``width`` x ``height`` canvas."""

		svg = xml.etree.ElementTree.Element("svg", {
			"xmlns": "http://www.w3.org/2000/svg",
			"width": _fmt(width),
			"height": _fmt(height),
		})

		xml.etree.ElementTree.SubElement(svg, "rect", {
			"width": "100%", "height": "100%", "fill": self.background,
		})

		group = xml.etree.ElementTree.SubElement(svg, "g")

		for command in commands:

			if isinstance(command, Translate):
				group = xml.etree.ElementTree.SubElement(group, "g", {"transform": f"translate({_fmt(command.dx)}, 0)"})

			elif isinstance(command, DrawStave):
				self._draw_stave(group, command)

			elif isinstance(command, DrawNote):
				self._draw_note(group, command)

		return xml.etree.ElementTree.tostring(svg, encoding="unicode")

	def _draw_stave (self, parent: xml.etree.ElementTree.Element, stave: DrawStave) -> None:

		for line in range(5):
			y = stave.y + line * LINE_SPACING
			xml.etree.ElementTree.SubElement(parent, "line", {
				"x1": _fmt(stave.x), "y1": _fmt(y),
				"x2": _fmt(stave.x + stave.width), "y2": _fmt(y),
				"stroke": "#000",
			})

		xml.etree.ElementTree.SubElement(parent, "line", {
			"x1": _fmt(stave.x + stave.width), "y1": _fmt(stave.y),
			"x2": _fmt(stave.x + stave.width), "y2": _fmt(stave.y + 4 * LINE_SPACING),
			"stroke": "#000",
		})

	def _draw_note (self, parent: xml.etree.ElementTree.Element, note: DrawNote) -> None:

		xml.etree.ElementTree.SubElement(parent, "ellipse", {
			"cx": _fmt(note.x), "cy": _fmt(note.y), "rx": "5", "ry": "4",
			"fill": self.note_color, "class": f"note {note.voice}",
		})

		stem_x = note.x + 5
		stem_top = note.y - 3.5 * LINE_SPACING

		xml.etree.ElementTree.SubElement(parent, "line", {
			"x1": _fmt(stem_x), "y1": _fmt(note.y),
			"x2": _fmt(stem_x), "y2": _fmt(stem_top),
			"stroke": self.note_color,
		})

		if note.duration == "8":
			xml.etree.ElementTree.SubElement(parent, "line", {
				"x1": _fmt(stem_x), "y1": _fmt(stem_top),
				"x2": _fmt(stem_x + 6), "y2": _fmt(stem_top + 8),
				"stroke": self.note_color,
			})


def score_width (measure_count: int, measure_width: float = autobach.constants.DEFAULT_MEASURE_WIDTH) -> float:

	"""Canvas width needed to hold ``measure_count`` measures."""

	return measure_width * measure_count + EXTRA_WIDTH


def _fmt (value: float) -> str:

	text = f"{value:.2f}".rstrip("0").rstrip(".")
	return "0" if text == "-0" else text
