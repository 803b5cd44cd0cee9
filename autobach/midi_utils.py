import logging
import math
import typing

import mido

logger = logging.getLogger(__name__)

NOTE_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]


def pitch_to_frequency(pitch: float) -> float:
    """
    Convert a MIDI pitch to a frequency in Hz (12-TET, A4 = 69 = 440 Hz).
    """
    return 440.0 * 2.0 ** ((pitch - 69) / 12.0)


def frequency_to_pitch(frequency: float) -> int:
    """
    Convert a frequency in Hz to the nearest MIDI pitch.

    Raises:
        ValueError: If the frequency is not positive.
    """
    if frequency <= 0:
        raise ValueError(f"Frequency must be positive, got {frequency}")

    return int(round(69 + 12 * math.log2(frequency / 440.0)))


def pitch_to_name(pitch: int) -> str:
    """
    Convert a MIDI pitch to a note name with octave, e.g. 60 → ``"C4"``, 70 → ``"A#4"``.
    """
    octave = (pitch // 12) - 1
    return f"{NOTE_NAMES[pitch % 12]}{octave}"


def select_output_device(device_name: typing.Optional[str] = None) -> typing.Tuple[typing.Optional[str], typing.Optional[typing.Any]]:
    """
    Open a MIDI output port for note playback.

    If `device_name` is provided and exists, that port is opened. If it is
    omitted, the first available port is used so the program can start
    without interaction. Any failure is logged and reported as (None, None);
    playback then continues silently.

    Returns:
        A tuple of (device_name, midi_out_object) or (None, None) on failure.
    """
    try:
        outputs = mido.get_output_names()
        logger.info(f"Available MIDI outputs: {outputs}")

        if not outputs:
            logger.error("No MIDI output devices found.")
            return None, None

        if device_name is None:
            device_name = outputs[0]
            logger.info(f"No MIDI output requested - using '{device_name}'")

        elif device_name not in outputs:
            logger.error(
                f"MIDI output device '{device_name}' not found. "
                f"Available devices: {outputs}"
            )
            return None, None

        midi_out = mido.open_output(device_name)
        logger.info(f"Opened MIDI output: {device_name}")
        return device_name, midi_out

    except Exception as e:
        logger.error(f"Failed to open MIDI output: {e}")
        return None, None
