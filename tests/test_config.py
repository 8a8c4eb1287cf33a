from __future__ import annotations

import logging

import pytest

from posttime import config as config_mod
from posttime.config import Settings
from posttime.logger import configure_logging, get_logger, resolve_level


@pytest.fixture(autouse=True)
def _no_dotenv(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config_mod, "load_dotenv", lambda: False)
    for name in (
        "POSTTIME_HARVEST_CAP",
        "POSTTIME_OCR_ENGINE",
        "POSTTIME_OCR_LANGUAGE",
        "POSTTIME_OCR_TIMEOUT_S",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s == Settings()
    assert s.policy().harvest_cap == 50
    assert s.policy().ocr_timeout_s == 30.0


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POSTTIME_HARVEST_CAP", "20")
    monkeypatch.setenv("POSTTIME_OCR_ENGINE", "Tesseract")
    monkeypatch.setenv("POSTTIME_OCR_LANGUAGE", "eng")
    monkeypatch.setenv("POSTTIME_OCR_TIMEOUT_S", "7.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    s = Settings.from_env()
    assert s.harvest_cap == 20
    assert s.ocr_engine == "tesseract"
    assert s.ocr_language == "eng"
    assert s.ocr_timeout_s == 7.5
    assert s.log_level == "DEBUG"


@pytest.mark.parametrize("name,value", [("POSTTIME_HARVEST_CAP", "lots"), ("POSTTIME_HARVEST_CAP", "0"), ("POSTTIME_OCR_TIMEOUT_S", "-1")])
def test_bad_numbers_raise(monkeypatch: pytest.MonkeyPatch, name: str, value: str) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        Settings.from_env()


def test_log_level_falls_back_to_info(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    assert resolve_level(None) == "INFO"
    assert resolve_level("warning") == "WARNING"


def test_loggers_live_under_package_namespace() -> None:
    assert get_logger("posttime.date.resolve").name == "posttime.date.resolve"
    assert get_logger("__main__").name == "posttime.__main__"

    root = logging.getLogger("posttime")
    before = list(root.handlers), root.level
    try:
        configure_logging("DEBUG")
        configure_logging("DEBUG")
        assert root.level == logging.DEBUG
        assert sum(1 for h in root.handlers if getattr(h, "_posttime", False)) == 1
    finally:
        root.handlers[:] = before[0]
        root.setLevel(before[1])
