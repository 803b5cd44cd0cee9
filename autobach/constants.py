"""Timing and voice constants for AutoBach.

Everything time-related derives from the fixed tempo: at 120 BPM one beat
lasts 0.5 seconds and a 4/4 measure lasts 2.0 seconds.
"""

TEMPO_BPM = 120
SECONDS_PER_BEAT = 60.0 / TEMPO_BPM
BEATS_PER_MEASURE = 4
MEASURE_SECONDS = BEATS_PER_MEASURE * SECONDS_PER_BEAT

# Beats per note for each duration name.
QUARTER_NOTE_BEATS = 1.0
EIGHTH_NOTE_BEATS = 0.5

# Every note sounds for an eighth note regardless of its voice role.
NOTE_LENGTH_SECONDS = EIGHTH_NOTE_BEATS * SECONDS_PER_BEAT

# Default root (middle C) and the C major degrees.
DEFAULT_ROOT = 60
C_MAJOR_SCALE = (0, 2, 4, 5, 7, 9, 11)

# Rolling window defaults.
DEFAULT_WINDOW_SIZE = 4
DEFAULT_MEASURE_WIDTH = 220

# MIDI output defaults.
DEFAULT_MIDI_CHANNEL = 0
DEFAULT_VELOCITY = 90
