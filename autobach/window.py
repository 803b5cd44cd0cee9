"""Append-only measure log with bounded views for rendering.

The log keeps every measure produced during a session.  Renderers only ever
see the most recent ``k`` measures, either as a :class:`RenderView` for the
notation renderer (with the horizontal scroll offset that hides older
measures off the left edge) or as numbered pairs for a textual listing.
Neither view copies or mutates the log.
"""

import dataclasses
import typing

import autobach.constants
import autobach.measure


@dataclasses.dataclass(frozen=True)
class RenderView:

	"""The measures currently on screen and how far the staff is scrolled."""

	measures: typing.Sequence[autobach.measure.Measure]
	scroll_offset: float
	first_index: int


class MeasureLog:

	"""Ordered, append-only sequence of measures.

	Grows for the lifetime of a session: nothing is ever removed, reordered
	or replaced, including on stop.
	"""

	def __init__ (self) -> None:

		"""Start with an empty log."""

		self._measures: typing.List[autobach.measure.Measure] = []

	def __len__ (self) -> int:

		return len(self._measures)

	def __iter__ (self) -> typing.Iterator[autobach.measure.Measure]:

		return iter(self._measures)

	def __getitem__ (self, index: int) -> autobach.measure.Measure:

		return self._measures[index]

	def append (self, measure: autobach.measure.Measure) -> int:

		"""Add a measure at the end of the log and return its index."""

		self._measures.append(measure)
		return len(self._measures) - 1

	def tail (self) -> typing.Optional[autobach.measure.Measure]:

		"""Return the most recent measure, or None when the log is empty."""

		return self._measures[-1] if self._measures else None

	def _window_start (self, k: int) -> int:

		if k <= 0:
			raise ValueError(f"Window size must be positive, got {k}")

		return max(0, len(self._measures) - k)

	def render_window (
		self,
		k: int = autobach.constants.DEFAULT_WINDOW_SIZE,
		measure_width: float = autobach.constants.DEFAULT_MEASURE_WIDTH
	) -> RenderView:

		"""Return the last ``min(k, len)`` measures and the matching scroll offset.

		Once more than ``k`` measures exist the offset is
		``(len - k) * measure_width``, which keeps exactly the most recent ``k``
		measures in view.
		"""

		start = self._window_start(k)

		return RenderView(
			measures = self._measures[start:],
			scroll_offset = start * measure_width,
			first_index = start
		)

	def display_window (
		self,
		k: int = autobach.constants.DEFAULT_WINDOW_SIZE
	) -> typing.List[typing.Tuple[int, autobach.measure.Measure]]:

		"""Return ``(index, measure)`` pairs for the same measures as :meth:`render_window`."""

		start = self._window_start(k)

		return list(enumerate(self._measures[start:], start=start))
