from __future__ import annotations

import math
from typing import Dict, Iterable, List, Sequence

import pandas as pd

from kpc_ai_dashboard.core.schema import CHECKBOX_DELIMITER, EXCLUDE_KEYWORDS


def round_percent(part: float, whole: float) -> int:
    """
    Percentage of part/whole rounded half-up to an int; 0 when whole is 0.

    Half-up (not Python's banker's rounding) so 2.5% shows as 3%, the way the
    dashboard has always displayed it.
    """
    if not whole:
        return 0
    return int(math.floor(part / whole * 100 + 0.5))


def is_excluded_item(item: str) -> bool:
    return any(ex in item for ex in EXCLUDE_KEYWORDS)


def parse_checkbox(responses: Iterable[str]) -> Dict[str, int]:
    """
    Count the discrete items selected across multi-select (checkbox) cells.

    Each non-empty cell is split on ", " and every trimmed item is counted,
    except items containing a "not used / none / n.a." sentinel phrase.

    The returned dict keeps first-seen order; fuzzy tool matching depends on it.
    """
    counter: Dict[str, int] = {}
    for response in responses:
        if not response:
            continue
        for raw in str(response).split(CHECKBOX_DELIMITER):
            item = raw.strip()
            if is_excluded_item(item):
                continue
            counter[item] = counter.get(item, 0) + 1
    return counter


def match_tool_count(counter: Dict[str, int], tool: str) -> int:
    """
    Count for a canonical tool name within an item counter.

    Exact label first. If that yields zero, fall back to case-insensitive
    substring containment in either direction; when several labels match, the
    LAST one in counter order wins (not the largest).
    """
    count = counter.get(tool, 0)
    if count:
        return count

    tool_lower = tool.lower()
    for key, value in counter.items():
        key_lower = key.lower()
        if tool_lower in key_lower or key_lower in tool_lower:
            count = value
    return count


def group_percentages(group: pd.DataFrame, column: str, tools: Sequence[str]) -> List[int]:
    """
    Adoption rate (0-100) of each tool within a cohort, aligned with `tools`.

    Rates are independent per tool. With multi-select answers they do not sum
    to 100.
    """
    n = len(group)
    if n == 0:
        return [0 for _ in tools]

    if column in group.columns:
        responses = group[column].fillna("").astype(str).tolist()
    else:
        responses = []
    counter = parse_checkbox(responses)

    return [round_percent(match_tool_count(counter, tool), n) for tool in tools]
