from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Callable, Optional, Union

from .base import OcrEngine, OcrError

ImageSource = Union[bytes, Callable[[], bytes]]


@dataclass
class OcrFallback:
    """Binds an OCR engine to the screenshot region of one post header.

    `image` may be the PNG bytes or a zero-arg callable producing them, so
    the caller only pays for a screenshot when every DOM tier failed.
    `timeout_s`, when set, overrides the resolver policy's OCR timeout for
    this header.
    """

    engine: OcrEngine
    image: ImageSource
    timeout_s: Optional[float] = None

    def _image_bytes(self) -> bytes:
        b = self.image() if callable(self.image) else self.image
        if not isinstance(b, (bytes, bytearray)) or not b:
            raise OcrError("No image region to recognize")
        return bytes(b)

    def _run(self) -> str:
        return self.engine.ocr_png_bytes(self._image_bytes())

    def recognize(self, timeout_s: float | None = None) -> str:
        """Capture and recognize on a daemon thread, raising OcrError past the timeout.

        The timeout covers producing the image as well as the engine call. A
        worker still running at the deadline is abandoned; being a daemon it
        never holds up interpreter exit.
        """
        limit = self.timeout_s if self.timeout_s is not None else timeout_s
        done = threading.Event()
        box: dict = {}

        def worker() -> None:
            try:
                box["text"] = self._run()
            except Exception as e:
                box["error"] = e
            finally:
                done.set()

        threading.Thread(target=worker, name=f"posttime-ocr-{self.engine.name}", daemon=True).start()
        if not done.wait(limit):
            raise OcrError(f"{self.engine.name} OCR timed out after {limit}s")
        if "error" in box:
            raise box["error"]
        if "text" not in box:
            raise OcrError(f"{self.engine.name} OCR worker exited without a result")
        return box["text"]
