from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from screening import app_services


APP_PATH = str(Path(__file__).resolve().parent.parent / "main.py")


def _run_app():
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    return at.run()


def test_form_renders_one_radio_per_symptom():
    at = _run_app()
    assert not at.exception
    assert len(at.radio) == 6
    assert at.radio[1].label == "Weight Gain"
    assert list(at.radio[1].options) == ["None", "Slight", "Moderate", "Significant"]
    assert all(radio.value is None for radio in at.radio)


def test_submit_disabled_until_four_answers():
    at = _run_app()
    button = at.button(key="submit_btn")
    assert button.disabled
    assert button.label == "Please rate at least 4 symptoms"

    for radio in at.radio[:4]:
        radio.set_value("Moderate")
    at.run()

    button = at.button(key="submit_btn")
    assert not at.exception
    assert not button.disabled
    assert button.label == "Analyze Symptoms"
    assert at.session_state["answers"] == {
        "fatigue": "Moderate",
        "weightGain": "Moderate",
        "coldSensitivity": "Moderate",
        "drySkin": "Moderate",
    }


@pytest.fixture
def no_delay(tmp_path, monkeypatch):
    path = tmp_path / "settings.yaml"
    path.write_text("submit_delay_seconds: 0\n", encoding="utf-8")
    monkeypatch.setattr(app_services, "SETTINGS_PATH", path)
    return path


def _submit(at, answers):
    for radio, label in zip(at.radio, answers):
        radio.set_value(label)
    at.run()
    at.button(key="submit_btn").click().run()
    # second pass covers the rerun that stores the result
    at.run()
    return at


def _markdown_text(at):
    return "\n".join(md.value for md in at.markdown)


def test_submit_shows_positive_result(no_delay):
    at = _submit(_run_app(), ["Severe", "Significant", "Severe", "Severe", "Severe", "Severe"])
    assert not at.exception
    text = _markdown_text(at)
    assert "Potential Thyroid Condition Detected" in text
    assert "Analysis Accuracy: 95.0%" in text
    assert "Please consult with a healthcare professional" in text
    assert at.session_state["in_flight"] is False
    assert at.button(key="submit_btn").label == "Analyze Symptoms"


def test_submit_shows_negative_result(no_delay):
    at = _submit(_run_app(), ["None", "None", "None", "None"])
    assert not at.exception
    text = _markdown_text(at)
    assert "No Thyroid Condition Detected" in text
    assert "Analysis Accuracy: 91.7%" in text
    assert at.session_state["in_flight"] is False
    assert at.session_state["last_result"]["diagnosis"] is False
