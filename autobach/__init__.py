"""
AutoBach - an endless, self-scrolling three-voice generator for Python.

AutoBach writes music one 4/4 measure at a time and never stops: each
measure continues every voice from where the previous measure left off, is
handed to a synth with two measures of look-ahead, and is appended to a log
whose last few measures are shown on screen.

What it does:

- **Three fixed voices.** A low and a mid line of four quarter notes and a
  melody of eight eighth notes, each wandering by small steps inside its own
  register.
- **Always in key.** Every step is snapped to a diatonic scale (C major by
  default), so the walk never leaves the key.
- **Seamless across bar lines.** Each voice starts from the last pitch of
  the same voice in the previous measure.
- **Scheduled ahead of time.** Notes are handed to the synth with absolute
  start times on its own clock, two measures ahead, from a drift-free
  periodic tick at a fixed 120 BPM.
- **Rolling window.** The full history is kept; renderers see only the most
  recent measures plus the scroll offset that hides older ones.
- **Reproducible.** Pass a seed (or your own ``random.Random``) and the
  same stream of measures comes out every time.

Minimal example:

    ```python
    import asyncio
    import autobach

    async def main ():
        session = autobach.Session(autobach.MidiSynth(), composer=autobach.MeasureComposer(seed=42))
        session.init()
        await session.start()
        await asyncio.sleep(20)
        session.teardown()

    asyncio.run(main())
    ```

Or run ``python -m autobach`` and use ``s`` / ``x`` / ``q`` to start, stop
and quit.

Package-level exports: ``Session``, ``MeasureComposer``, ``Measure``,
``MeasureLog``, ``MidiSynth``, ``quantize``.
"""

import autobach.intervals
import autobach.measure
import autobach.session
import autobach.synth
import autobach.window


Measure = autobach.measure.Measure
MeasureComposer = autobach.measure.MeasureComposer
MeasureLog = autobach.window.MeasureLog
MidiSynth = autobach.synth.MidiSynth
Session = autobach.session.Session
quantize = autobach.intervals.quantize
