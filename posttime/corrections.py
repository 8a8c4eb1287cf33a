from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Callable, Sequence, Union

WS_RE = re.compile(r"\s+")

Replacement = Union[str, Callable[[re.Match], str]]
Correction = tuple[re.Pattern, Replacement]


def _meridiem(m: re.Match) -> str:
    return f"{m.group(1)} {m.group(2).upper()}M"


# Safe, date-shaped fixes for common OCR noise on post headers.
GENERIC_RULES: list[Correction] = [
    # "3 : 45" -> "3:45"
    (re.compile(r"(\d)\s*:\s*(\d{2})\b"), r"\1:\2"),
    # "p.m." / "p m" / "pm" -> "PM"
    (re.compile(r"(\d)\s*([ap])\.?\s?m\b\.?", re.IGNORECASE), _meridiem),
    # "Yesterday at3:45" -> "Yesterday at 3:45"
    (re.compile(r"\bat(\d)", re.IGNORECASE), r"at \1"),
]


def collapse_whitespace(text: str) -> str:
    return WS_RE.sub(" ", text or "").strip()


def _compile(pattern: str, where: str) -> re.Pattern:
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise ValueError(f"Bad correction pattern {pattern!r} in {where}: {e}") from e


def compile_corrections(obj: Any, where: str = "corrections") -> list[Correction]:
    """Turn a decoded corrections document into ordered (pattern, replacement) pairs.

    Accepted shapes:
    1) {"Septernber": "September"}: whole-word, case-insensitive; longer
       keys are tried first so "Sep 13" wins over "Sep".
    2) [["<regex>", "<replacement>"], ...]: applied in the listed order.

    Anything else raises ValueError.
    """
    if isinstance(obj, dict):
        by_key = {str(k).strip(): str(v) for k, v in obj.items() if str(k).strip()}
        keys = sorted(by_key, key=len, reverse=True)
        return [(_compile(rf"\b{re.escape(k)}\b", where), by_key[k]) for k in keys]

    if isinstance(obj, list):
        rules: list[Correction] = []
        for n, item in enumerate(obj):
            if not (isinstance(item, (list, tuple)) and len(item) == 2):
                raise ValueError(f"{where}[{n}]: expected a [pattern, replacement] pair, got {item!r}")
            rules.append((_compile(str(item[0]), f"{where}[{n}]"), str(item[1])))
        return rules

    raise ValueError(f"{where}: expected a JSON object or list, got {type(obj).__name__}")


def load_corrections(path: Path | None) -> list[Correction]:
    """Read a corrections JSON file. A missing file means no corrections."""
    if not path or not path.exists():
        return []
    try:
        obj = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"{path}: not valid JSON ({e})") from e
    return compile_corrections(obj, str(path))


def apply_corrections(text: str, rules: Sequence[Correction] = ()) -> str:
    """Generic OCR fixes first, then the caller's rules in order."""
    out = text
    for patt, repl in GENERIC_RULES:
        out = patt.sub(repl, out)
    for patt, repl in rules:
        out = patt.sub(repl, out)
    return out


def clean_ocr_text(text: str, rules: Sequence[Correction] = ()) -> str:
    """Whitespace-collapse OCR output, then apply corrections."""
    return collapse_whitespace(apply_corrections(collapse_whitespace(text), rules))
