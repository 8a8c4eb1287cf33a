from __future__ import annotations

import os
import time
from dataclasses import dataclass

import requests
from dotenv import load_dotenv

from .base import OcrEngine, OcrError


@dataclass
class AzureVisionReadEngine(OcrEngine):
    """Azure AI Vision Read (v3.2) engine for post-header screenshots."""

    endpoint: str
    key: str
    language: str = "en"
    timeout_s: float = 30.0
    poll_interval_s: float = 0.5

    name: str = "azure"

    @classmethod
    def from_env(cls, *, language: str = "en", timeout_s: float = 30.0) -> "AzureVisionReadEngine":
        load_dotenv()
        endpoint = os.environ.get("AZURE_VISION_ENDPOINT", "").strip()
        key = os.environ.get("AZURE_VISION_KEY", "").strip()
        if not endpoint or not key:
            raise RuntimeError("Missing AZURE_VISION_ENDPOINT/AZURE_VISION_KEY (set env vars or create .env)")
        return cls(endpoint=endpoint, key=key, language=language, timeout_s=float(timeout_s))

    def _submit(self, png_bytes: bytes) -> str:
        url = self.endpoint.rstrip("/") + "/vision/v3.2/read/analyze"
        headers = {
            "Ocp-Apim-Subscription-Key": self.key,
            "Content-Type": "application/octet-stream",
        }
        try:
            r = requests.post(url, headers=headers, params={"language": self.language}, data=png_bytes, timeout=15)
        except requests.RequestException as e:
            raise OcrError(f"Azure analyze request failed: {e}") from e
        if r.status_code != 202:
            raise OcrError(f"Azure analyze failed ({r.status_code}): {r.text}")

        op_loc = r.headers.get("Operation-Location")
        if not op_loc:
            raise OcrError("Azure response missing Operation-Location header")
        return op_loc

    def ocr_png_bytes(self, png_bytes: bytes) -> str:
        if not png_bytes:
            raise OcrError("Empty image region")

        op_loc = self._submit(png_bytes)
        headers = {"Ocp-Apim-Subscription-Key": self.key}

        deadline = time.monotonic() + float(self.timeout_s)
        while time.monotonic() < deadline:
            try:
                pr = requests.get(op_loc, headers=headers, timeout=15)
            except requests.RequestException as e:
                raise OcrError(f"Azure poll request failed: {e}") from e
            if pr.status_code != 200:
                raise OcrError(f"Azure poll failed ({pr.status_code}): {pr.text}")

            j = pr.json()
            status = str(j.get("status", "")).lower()
            if status == "succeeded":
                read_results = (j.get("analyzeResult") or {}).get("readResults") or []
                lines = [
                    str(line.get("text") or "").strip()
                    for page in read_results
                    for line in page.get("lines") or []
                ]
                return " ".join(t for t in lines if t)
            if status == "failed":
                raise OcrError(f"Azure Read failed: {j}")
            time.sleep(self.poll_interval_s)

        raise OcrError("Azure Read timed out polling")
