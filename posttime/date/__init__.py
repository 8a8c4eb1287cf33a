"""Post timestamp resolution.

Core philosophy: a post may expose its time in several partial forms (machine
attributes, relative text, a screenshot). Try them in a fixed priority order,
take the first that yields a valid instant, and report Unresolved rather than
guess.
"""

from .types import Candidate, CandidateKind, Resolution, ResolvedTimestamp, ResolvePolicy, Unresolved
from .normalize import normalize_candidate, normalize_epoch, normalize_iso
from .parsers import parse_relative, parse_relative_detailed
from .resolve import Target, resolve_batch, resolve_post_time
