"""Play a fixed number of measures from a seeded stream, then stop.

Runs without any user interaction: starts the session, lets the periodic
tick append measures for a while, stops, and prints the textual window.

	python examples/fixed_length.py
"""

import asyncio
import logging

import autobach
import autobach.constants
import autobach.midi_utils


logging.basicConfig(level=logging.INFO)

MEASURES = 8


async def main () -> None:

	session = autobach.Session(autobach.MidiSynth(), composer=autobach.MeasureComposer(seed=2024))
	session.init()

	await session.start()

	# Two measures are scheduled up front; each tick adds one more.
	await asyncio.sleep((MEASURES - 2) * autobach.constants.MEASURE_SECONDS + 0.1)

	session.stop()

	for index, measure in session.log.display_window(4):
		print(f"Measure {index}:")
		for role, notes in measure.voices():
			print(f"  {role.name:<6} {' '.join(autobach.midi_utils.pitch_to_name(n.pitch) for n in notes)}")

	session.teardown()


if __name__ == "__main__":
	asyncio.run(main())
