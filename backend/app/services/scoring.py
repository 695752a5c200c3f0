from __future__ import annotations

import re
from typing import Callable, List, Optional, Pattern, Tuple

# Order matters: the first pattern that converts cleanly wins.
# Values are not range-checked, "150 points" gives 150.
SCORE_MATCHERS: List[Tuple[Pattern[str], Callable[[re.Match], int]]] = [
    (re.compile(r"(?:score|rating)[:\s]*(\d+)", re.IGNORECASE), lambda m: int(m.group(1))),
    (re.compile(r"(\d+)/100", re.IGNORECASE), lambda m: int(m.group(1))),
    (re.compile(r"(\d+)\s*out\s*of\s*100", re.IGNORECASE), lambda m: int(m.group(1))),
    (re.compile(r"(\d+)\s*points", re.IGNORECASE), lambda m: int(m.group(1))),
]


def extract_score(text: Optional[str]) -> Optional[int]:
    t = text or ""
    for pattern, convert in SCORE_MATCHERS:
        m = pattern.search(t)
        if not m:
            continue
        try:
            return convert(m)
        except ValueError:
            # digit run past the interpreter's int-conversion limit
            continue
    return None
