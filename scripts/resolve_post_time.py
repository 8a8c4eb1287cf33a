#!/usr/bin/env python3
"""Resolve post timestamps from harvested DOM candidates (plus optional OCR).

Each input is a JSON file written by the page walker, either:
  - a list of element records: [{"datetime": ..., "title": ..., "aria-label": ..., "text": ...}, ...]
  - a list of classified candidates: [{"kind": "title", "value": "2 h"}, ...]
  - an object: {"url": "...", "elements": [...], "candidates": [...], "screenshot": "header.png"}

Usage:
  python3 scripts/resolve_post_time.py post1.json [post2.json ...] \
    --engine tesseract --screenshot header.png --out results.jsonl

Env (or .env):
  POSTTIME_HARVEST_CAP, POSTTIME_OCR_ENGINE, POSTTIME_OCR_LANGUAGE, POSTTIME_OCR_TIMEOUT_S, LOG_LEVEL
  AZURE_VISION_ENDPOINT, AZURE_VISION_KEY (azure engine only)
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path

from posttime.config import Settings
from posttime.corrections import load_corrections
from posttime.date import ResolvePolicy, resolve_post_time
from posttime.harvest import candidates_from_elements, candidates_from_pairs
from posttime.logger import configure_logging, get_logger
from posttime.ocr.fallback import OcrFallback
from posttime.ocr.registry import build_engine
from posttime.records import build_error_record, build_post_date_record

logger = get_logger(__name__)


def load_target(path: Path, cap: int) -> tuple[str, list, Path | None]:
    """Return (url, candidates, screenshot path) for one input file."""
    obj = json.loads(path.read_text(encoding="utf-8"))
    url = str(path)
    screenshot = None

    if isinstance(obj, dict):
        url = str(obj.get("url") or url)
        if obj.get("screenshot"):
            screenshot = (path.parent / str(obj["screenshot"])).resolve()
        if obj.get("candidates"):
            return url, candidates_from_pairs(obj["candidates"], cap=cap), screenshot
        return url, candidates_from_elements(obj.get("elements") or [], cap=cap), screenshot

    if isinstance(obj, list):
        if obj and isinstance(obj[0], dict) and "kind" in obj[0]:
            return url, candidates_from_pairs(obj, cap=cap), screenshot
        return url, candidates_from_elements(obj, cap=cap), screenshot

    raise ValueError(f"Unsupported input shape in {path}: {type(obj).__name__}")


def main() -> None:
    settings = Settings.from_env()

    ap = argparse.ArgumentParser()
    ap.add_argument("inputs", nargs="+", help="candidate JSON file(s)")
    ap.add_argument("--out", default=None, help="Write JSON lines here (default: stdout)")
    ap.add_argument("--engine", default=settings.ocr_engine, help="OCR engine: none|azure|tesseract")
    ap.add_argument("--ocr-language", default=settings.ocr_language, help="OCR language hint (engine default if unset)")
    ap.add_argument("--ocr-timeout", type=float, default=settings.ocr_timeout_s, help="OCR timeout seconds")
    ap.add_argument("--screenshot", default=None, help="Header PNG used for every input lacking its own")
    ap.add_argument("--cap", type=int, default=settings.harvest_cap, help="Max candidates considered per post")
    ap.add_argument("--now", default=None, help="Reference clock override (ISO, e.g. 2025-09-13T12:00:00+08:00)")
    ap.add_argument(
        "--corrections-map",
        default=None,
        help="Optional JSON corrections (dict map or regex list) applied to OCR text",
    )
    ap.add_argument("--log-level", default=settings.log_level)
    args = ap.parse_args()

    configure_logging(args.log_level)

    fixed_now = datetime.fromisoformat(args.now) if args.now else None
    policy = ResolvePolicy(harvest_cap=int(args.cap), ocr_timeout_s=float(args.ocr_timeout))
    engine = build_engine(args.engine, language=args.ocr_language, timeout_s=args.ocr_timeout)
    corr = Path(args.corrections_map).expanduser().resolve() if args.corrections_map else None
    try:
        load_corrections(corr)
    except (OSError, ValueError) as e:
        ap.error(str(e))
    default_shot = Path(args.screenshot).expanduser().resolve() if args.screenshot else None

    out_f = open(args.out, "w", encoding="utf-8") if args.out else sys.stdout
    ok = unresolved = failed = 0
    try:
        for inp in args.inputs:
            path = Path(inp).expanduser().resolve()
            if not path.exists():
                print(f"Missing: {path}", file=sys.stderr)
                continue
            try:
                url, candidates, shot = load_target(path, policy.harvest_cap)
                shot = shot or default_shot
                ocr = None
                if engine and shot:
                    ocr = OcrFallback(engine=engine, image=shot.read_bytes)
                outcome = resolve_post_time(candidates, ocr=ocr, now=fixed_now, policy=policy, corrections_path=corr)
                rec = build_post_date_record(url, outcome)
            except (OSError, ValueError) as e:
                logger.warning(f"Date FAIL: {path} => {e}")
                rec = build_error_record(str(path), e)

            if rec["status"] == "success":
                ok += 1
                logger.info(f"Date OK: {rec['url']} => {rec['iso']}")
            elif rec["status"] == "unresolved":
                unresolved += 1
                logger.warning(f"Date UNRESOLVED: {rec['url']}")
            else:
                failed += 1
            out_f.write(json.dumps(rec, ensure_ascii=False) + "\n")
    finally:
        if out_f is not sys.stdout:
            out_f.close()

    print(f"OK: resolved={ok} unresolved={unresolved} errors={failed}", file=sys.stderr)


if __name__ == "__main__":
    main()
