"""Approximate token counting.

Custom providers expose no tokenizer, so counts are estimated from
character classes.  The result is a heuristic, not what any real
tokenizer would report; use it for budgeting, never for billing.
"""

from __future__ import annotations

import math
import re

_WORD_RE = re.compile(r"[a-zA-Z]+[']?[a-zA-Z]*")
_CJK_RE = re.compile(r"[\u4e00-\u9fff]")
_NUMBER_RE = re.compile(r"\b\d+\b")
_PUNCT_RE = re.compile(r"[.,!?;:\"'(){}\[\]<>@#$%^&*\-_+=~`|\\/]")
_SPACE_RE = re.compile(r"\s+")

WORD_WEIGHT = 1.2
CJK_WEIGHT = 1.0
NUMBER_WEIGHT = 0.8
PUNCT_WEIGHT = 0.5
SPACE_RUNS_PER_TOKEN = 5


def estimate_tokens(text: str) -> int:
    """Estimate the token count of *text*.

    ``ceil(1.2*words + cjk + 0.8*numbers + 0.5*punct + ceil(space_runs / 5))``
    """
    if not text:
        return 0
    words = len(_WORD_RE.findall(text))
    cjk = len(_CJK_RE.findall(text))
    numbers = len(_NUMBER_RE.findall(text))
    punct = len(_PUNCT_RE.findall(text))
    spaces = math.ceil(len(_SPACE_RE.findall(text)) / SPACE_RUNS_PER_TOKEN)
    return math.ceil(
        words * WORD_WEIGHT
        + cjk * CJK_WEIGHT
        + numbers * NUMBER_WEIGHT
        + punct * PUNCT_WEIGHT
        + spaces
    )
