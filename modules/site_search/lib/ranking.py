from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any

from .models import Candidate

_TAG_RE = re.compile(r"<[^>]*>")

# Description hits count for less than title hits.
DESCRIPTION_WEIGHT = 0.8
SUBSTRING_SCORE = 0.8
MIN_TOKEN_LEN = 4


def score(candidate: str | None, reference: str | None) -> float:
    """
    Cheap title similarity in [0, 1].

    1.0 on a case-insensitive exact match, 0.8 when one contains the other,
    otherwise shared-word pairs (words longer than 3 chars) over the longer
    word count. Empty input scores 0.
    """
    a = (candidate or "").lower().strip()
    b = (reference or "").lower().strip()
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    if a in b or b in a:
        return SUBSTRING_SCORE

    words_a = a.split()
    words_b = b.split()
    matches = 0
    for wa in words_a:
        for wb in words_b:
            if wa == wb and len(wa) >= MIN_TOKEN_LEN:
                matches += 1
    # Repeated words can pair more than once; keep the result in range.
    return min(1.0, matches / max(len(words_a), len(words_b)))


def strip_tags(text: str) -> str:
    return _TAG_RE.sub("", text or "")


def rank(items: Iterable[Mapping[str, Any]], reference: str) -> list[Candidate]:
    """
    Score every usable raw hit ({url, title, desc}) and sort best-first.
    Ties keep their original order.
    """
    candidates: list[Candidate] = []
    for item in items:
        if not isinstance(item, Mapping):
            continue
        url = str(item.get("url") or "").strip()
        raw_title = str(item.get("title") or "")
        title = strip_tags(raw_title).strip()
        if not url or not title:
            continue
        desc = str(item.get("desc") or item.get("description") or "")

        title_score = score(raw_title, reference)
        desc_score = score(desc, reference)
        candidates.append(
            Candidate(
                url=url,
                title=title,
                description=desc,
                score=max(title_score, desc_score * DESCRIPTION_WEIGHT),
            )
        )
    # sorted() is stable, reverse=True included
    return sorted(candidates, key=lambda c: c.score, reverse=True)


def select_best(items: Iterable[Mapping[str, Any]] | None, reference: str) -> Candidate | None:
    """Pick the top-ranked hit, or None when nothing has both a url and a title."""
    ranked = rank(items or [], reference)
    return ranked[0] if ranked else None
