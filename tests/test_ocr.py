from __future__ import annotations

import pytest
import requests

from posttime.ocr import azure as azure_mod
from posttime.ocr.azure import AzureVisionReadEngine
from posttime.ocr.base import OcrError
from posttime.ocr.fallback import OcrFallback
from posttime.ocr.registry import build_engine
from posttime.ocr.tesseract import TesseractEngine


class FakeResponse:
    def __init__(self, status_code: int, payload: dict | None = None, headers: dict | None = None) -> None:
        self.status_code = status_code
        self._payload = payload or {}
        self.headers = headers or {}
        self.text = str(payload)

    def json(self) -> dict:
        return self._payload


def _engine() -> AzureVisionReadEngine:
    return AzureVisionReadEngine(endpoint="https://vision.example/", key="k", poll_interval_s=0)


def test_azure_read_joins_lines(monkeypatch: pytest.MonkeyPatch) -> None:
    posted: dict = {}

    def fake_post(url, headers, params, data, timeout):
        posted.update(url=url, params=params, data=data)
        return FakeResponse(202, headers={"Operation-Location": "https://vision.example/op/1"})

    polls = iter(
        [
            FakeResponse(200, {"status": "running"}),
            FakeResponse(
                200,
                {
                    "status": "succeeded",
                    "analyzeResult": {
                        "readResults": [{"lines": [{"text": "Jane Doe"}, {"text": " Yesterday at 3:45 PM "}, {"text": ""}]}]
                    },
                },
            ),
        ]
    )
    monkeypatch.setattr(azure_mod.requests, "post", fake_post)
    monkeypatch.setattr(azure_mod.requests, "get", lambda url, headers, timeout: next(polls))

    out = _engine().ocr_png_bytes(b"png")
    assert out == "Jane Doe Yesterday at 3:45 PM"
    assert posted["url"] == "https://vision.example/vision/v3.2/read/analyze"
    assert posted["params"] == {"language": "en"}


def test_azure_http_errors_raise_ocr_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(azure_mod.requests, "post", lambda *a, **k: FakeResponse(401, {"error": "denied"}))
    with pytest.raises(OcrError):
        _engine().ocr_png_bytes(b"png")

    def boom(*a, **k):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(azure_mod.requests, "post", boom)
    with pytest.raises(OcrError):
        _engine().ocr_png_bytes(b"png")


def test_azure_failed_status(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        azure_mod.requests,
        "post",
        lambda *a, **k: FakeResponse(202, headers={"Operation-Location": "https://vision.example/op/1"}),
    )
    monkeypatch.setattr(azure_mod.requests, "get", lambda *a, **k: FakeResponse(200, {"status": "failed"}))
    with pytest.raises(OcrError, match="failed"):
        _engine().ocr_png_bytes(b"png")


def test_azure_empty_image() -> None:
    with pytest.raises(OcrError):
        _engine().ocr_png_bytes(b"")


def test_azure_from_env_requires_credentials(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(azure_mod, "load_dotenv", lambda: False)
    monkeypatch.delenv("AZURE_VISION_ENDPOINT", raising=False)
    monkeypatch.delenv("AZURE_VISION_KEY", raising=False)
    with pytest.raises(RuntimeError):
        AzureVisionReadEngine.from_env()


def test_registry(monkeypatch: pytest.MonkeyPatch) -> None:
    assert build_engine("none") is None
    assert build_engine(None) is None

    eng = build_engine("tesseract", language="deu", timeout_s=5)
    assert isinstance(eng, TesseractEngine)
    assert eng.language == "deu"

    monkeypatch.setenv("AZURE_VISION_ENDPOINT", "https://vision.example")
    monkeypatch.setenv("AZURE_VISION_KEY", "k")
    az = build_engine("azure", language=None, timeout_s=12)
    assert isinstance(az, AzureVisionReadEngine)
    assert az.language == "en"
    assert az.timeout_s == 12.0

    with pytest.raises(ValueError):
        build_engine("paddle")


def test_fallback_rejects_missing_image() -> None:
    fb = OcrFallback(engine=TesseractEngine(), image=lambda: b"")
    with pytest.raises(OcrError):
        fb.recognize()
