from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable, Sequence

from ..corrections import clean_ocr_text, load_corrections
from ..logger import get_logger
from ..ocr.fallback import OcrFallback
from .normalize import normalize_candidate
from .parsers import as_reference, parse_relative_detailed
from .provenance import dom_tag, ocr_tag
from .types import TEXT_KINDS, Candidate, CandidateKind, Resolution, ResolvedTimestamp, ResolvePolicy, Unresolved

logger = get_logger(__name__)


@dataclass(frozen=True)
class Target:
    """One post to resolve: its harvested candidates and optional OCR fallback."""

    key: str
    candidates: Sequence[Candidate]
    ocr: OcrFallback | None = None


def _machine_tier(capped: Sequence[Candidate], kind: CandidateKind) -> ResolvedTimestamp | None:
    for i, c in enumerate(capped):
        if c.kind != kind:
            continue
        dt = normalize_candidate(kind, c.raw_value)
        if dt is None:
            continue
        return ResolvedTimestamp(instant=dt, source=dom_tag(kind), rule=f"normalize_{kind}", candidate_index=i)
    return None


def _text_tier(capped: Sequence[Candidate], now: datetime) -> ResolvedTimestamp | None:
    for i, c in enumerate(capped):
        if c.kind not in TEXT_KINDS:
            continue
        hit = parse_relative_detailed(c.raw_value, now)
        if hit is None:
            continue
        return ResolvedTimestamp(
            instant=hit.instant.astimezone(timezone.utc),
            source=dom_tag(c.kind),
            rule=hit.rule,
            candidate_index=i,
        )
    return None


def resolve_post_time(
    candidates: Sequence[Candidate],
    *,
    ocr: OcrFallback | None = None,
    now: datetime | None = None,
    policy: ResolvePolicy = ResolvePolicy(),
    corrections_path: Path | None = None,
) -> Resolution:
    """Resolve one post's timestamp.

    Tiers, first success wins:
    1) `datetime` attributes (ISO-like)
    2) `epoch` attributes (Unix seconds)
    3) title / aria-label / text, through the relative parser, in harvested order
    4) OCR of the header screenshot, only when 1-3 found nothing

    Only the first `policy.harvest_cap` candidates are considered. Never raises
    for bad input or OCR failure; returns Unresolved instead.
    """
    ref = as_reference(now)
    capped = list(candidates[: max(0, policy.harvest_cap)])

    for kind in ("datetime", "epoch"):
        res = _machine_tier(capped, kind)
        if res:
            logger.debug(f"Resolved via {res.source}: {res.iso}")
            return res

    res = _text_tier(capped, ref)
    if res:
        logger.debug(f"Resolved via {res.source} ({res.rule}): {res.iso}")
        return res

    if ocr is None:
        return Unresolved(reason=f"no DOM candidate resolved ({len(capped)} considered), OCR unavailable")

    # the fallback's own timeout, when set, takes precedence over the policy's
    try:
        rules = load_corrections(corrections_path)
        text = clean_ocr_text(ocr.recognize(policy.ocr_timeout_s), rules)
    except Exception as e:
        logger.warning(f"OCR fallback failed ({ocr.engine.name}): {e}")
        return Unresolved(reason="no DOM candidate resolved, OCR failed", ocr_error=str(e) or type(e).__name__)

    hit = parse_relative_detailed(text, ref)
    if hit is None:
        logger.debug(f"OCR text not parseable: {text!r}")
        return Unresolved(reason="no DOM candidate resolved, OCR text not parseable")

    res = ResolvedTimestamp(instant=hit.instant.astimezone(timezone.utc), source=ocr_tag(), rule=hit.rule)
    logger.debug(f"Resolved via ocr ({res.rule}): {res.iso}")
    return res


def resolve_batch(
    targets: Iterable[Target],
    *,
    clock: Callable[[], datetime] | None = None,
    policy: ResolvePolicy = ResolvePolicy(),
    corrections_path: Path | None = None,
) -> list[tuple[str, Resolution]]:
    """Resolve many posts, sampling the clock afresh for each one."""
    clock = clock or (lambda: datetime.now().astimezone())
    out: list[tuple[str, Resolution]] = []
    for t in targets:
        res = resolve_post_time(
            t.candidates,
            ocr=t.ocr,
            now=clock(),
            policy=policy,
            corrections_path=corrections_path,
        )
        out.append((t.key, res))
    return out
