import os

import autobach.__main__
import autobach.intervals
import autobach.measure
import autobach.synth


def test_load_config_missing_file (tmp_path) -> None:

	"""A missing config file yields an empty dict."""

	assert autobach.__main__.load_config(str(tmp_path / "missing.yaml")) == {}


def test_load_config_empty_file (tmp_path) -> None:

	"""An empty config file yields an empty dict."""

	path = tmp_path / "config.yaml"
	path.write_text("")

	assert autobach.__main__.load_config(str(path)) == {}


def test_load_config_reads_yaml (tmp_path) -> None:

	"""Nested YAML sections are returned as dicts."""

	path = tmp_path / "config.yaml"
	path.write_text("midi:\n  device_name: Synth A\n  channel: 3\nsession:\n  seed: 7\n")

	config = autobach.__main__.load_config(str(path))

	assert config["midi"] == {"device_name": "Synth A", "channel": 3}
	assert config["session"]["seed"] == 7


def test_build_session_from_config () -> None:

	"""Config values reach the synth and composer."""

	session = autobach.__main__.build_session({
		"midi": {"device_name": "Synth A", "channel": 3, "velocity": 100},
		"session": {"seed": 7, "scale": "dorian_mode"},
	})

	assert isinstance(session.synth, autobach.synth.MidiSynth)
	assert session.synth.device_name == "Synth A"
	assert session.synth.channel == 3
	assert session.synth.velocity == 100
	assert session.composer.scale_degrees == autobach.intervals.get_scale("dorian_mode")
	assert session.composer.compose() == autobach.measure.MeasureComposer(
		seed=7,
		scale_degrees=autobach.intervals.get_scale("dorian_mode")
	).compose()


def test_build_session_defaults () -> None:

	"""An empty config gives a C major session on channel 0."""

	session = autobach.__main__.build_session({})

	assert session.composer.scale_degrees == autobach.intervals.get_scale("major_ionian")
	assert session.synth.channel == 0


def test_write_score (tmp_path) -> None:

	"""The score file holds an SVG of the current window."""

	session = autobach.__main__.build_session({"session": {"seed": 1}})

	for _ in range(5):
		session.log.append(session.composer.compose(session.log.tail()))

	path = tmp_path / "score.svg"
	autobach.__main__.write_score(session, str(path), window=4, measure_width=220)

	svg = path.read_text()

	assert svg.startswith("<svg")
	assert "translate(-220, 0)" in svg
	assert os.path.getsize(path) > 0
