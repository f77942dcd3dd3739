import logging

from screening.app_services import configure_logging, default_settings, load_settings


def test_missing_file_gives_defaults(tmp_path):
    assert load_settings(tmp_path / "settings.yaml") == default_settings()


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("", encoding="utf-8")
    assert load_settings(path) == default_settings()


def test_overrides_are_applied(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "page_title: Thyroid Check\nsubmit_delay_seconds: 0\nlog_level: debug\n",
        encoding="utf-8",
    )
    settings = load_settings(path)
    assert settings == {
        "page_title": "Thyroid Check",
        "submit_delay_seconds": 0.0,
        "log_level": "DEBUG",
    }


def test_invalid_values_fall_back(tmp_path, caplog):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "page_title: ''\nsubmit_delay_seconds: -2\nlog_level: LOUD\ntheme: dark\n",
        encoding="utf-8",
    )
    with caplog.at_level(logging.WARNING, logger="screening.app_services"):
        settings = load_settings(path)
    assert settings == default_settings()
    messages = " ".join(record.getMessage() for record in caplog.records)
    assert "submit_delay_seconds" in messages
    assert "log_level" in messages
    assert "theme" in messages


def test_non_numeric_delay_falls_back(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("submit_delay_seconds: soon\n", encoding="utf-8")
    assert load_settings(path)["submit_delay_seconds"] == 1.5


def test_malformed_yaml_gives_defaults(tmp_path, caplog):
    path = tmp_path / "settings.yaml"
    path.write_text("page_title: [unclosed\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="screening.app_services"):
        assert load_settings(path) == default_settings()
    assert "Could not parse" in caplog.text


def test_non_mapping_gives_defaults(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("- one\n- two\n", encoding="utf-8")
    assert load_settings(path) == default_settings()


def test_configure_logging_sets_package_level():
    configure_logging("DEBUG")
    assert logging.getLogger("screening").level == logging.DEBUG
    configure_logging("INFO")
    assert logging.getLogger("screening").level == logging.INFO
