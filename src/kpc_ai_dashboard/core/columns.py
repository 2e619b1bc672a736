from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

import logging

logger = logging.getLogger(__name__)


def resolve_column(headers: Iterable[str], keywords: Sequence[str]) -> Optional[str]:
    """
    Find the header that represents a logical survey field.

    Two passes over the headers, in their original order:
      1. strict: every keyword is a substring of the header
      2. loose:  at least one keyword is a substring of the header

    The first header satisfying the strict predicate wins; otherwise the first
    header satisfying the loose one; otherwise None.

    Callers must not pass an empty keyword list: it matches every header
    (vacuous AND) and simply returns the first one.

    A miss is not an error. Optional questions are routinely absent from a
    given sheet snapshot and dependent aggregates degrade to empty results.
    """
    cols: List[str] = [str(h) for h in headers]

    for col in cols:
        if all(k in col for k in keywords):
            return col

    for col in cols:
        if any(k in col for k in keywords):
            return col

    logger.debug("No column matched keywords %s.", list(keywords))
    return None
