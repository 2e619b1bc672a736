from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

import logging
import pandas as pd

from kpc_ai_dashboard.core.schema import FULL_TENURE_ORDER, ROOKIE_BAND, ROOKIE_MARKER, TENURE_ORDER

logger = logging.getLogger(__name__)


@dataclass
class CohortSplit:
    """
    New-hire vs. veteran partition of one snapshot.

    Rows whose affiliation is blank belong to neither cohort but are still
    counted in `total`.
    """
    rookie: pd.DataFrame
    veteran: pd.DataFrame
    total: int


def _text(frame: pd.DataFrame, column: str) -> pd.Series:
    return frame[column].fillna("").astype(str)


def rookie_mask(frame: pd.DataFrame, affiliation_col: str) -> pd.Series:
    return _text(frame, affiliation_col).str.contains(ROOKIE_MARKER, regex=False)


def split_by_affiliation(frame: pd.DataFrame, affiliation_col: Optional[str]) -> CohortSplit:
    empty = frame.iloc[0:0]
    if affiliation_col is None or affiliation_col not in frame.columns:
        return CohortSplit(rookie=empty, veteran=empty, total=len(frame))

    values = _text(frame, affiliation_col)
    is_rookie = values.str.contains(ROOKIE_MARKER, regex=False)
    is_veteran = ~is_rookie & (values != "")

    return CohortSplit(
        rookie=frame[is_rookie],
        veteran=frame[is_veteran],
        total=len(frame),
    )


def split_by_tenure(
    frame: pd.DataFrame,
    tenure_col: Optional[str],
    affiliation_col: Optional[str],
) -> Dict[str, pd.DataFrame]:
    """
    Partition rows into tenure bands, with a synthetic new-hire band first.

      1. Every new-hire row goes to the "신입" band, whatever its tenure answer.
      2. Every row whose tenure answer equals one of TENURE_ORDER exactly goes
         to that band. Unmatched text puts the row in no band.

    A new-hire row that also carries a valid tenure answer lands in both
    bands. That double membership is kept as-is pending a product decision.

    The result is ordered like FULL_TENURE_ORDER and only contains bands that
    have at least one row.
    """
    groups: Dict[str, pd.DataFrame] = {}

    if affiliation_col is not None and affiliation_col in frame.columns:
        rookies = frame[rookie_mask(frame, affiliation_col)]
        if len(rookies) > 0:
            groups[ROOKIE_BAND] = rookies

    if tenure_col is not None and tenure_col in frame.columns:
        tenure = _text(frame, tenure_col)
        for band in TENURE_ORDER:
            members = frame[tenure == band]
            if len(members) > 0:
                groups[band] = members
    else:
        logger.warning("Tenure column not found; only the new-hire band is available.")

    return {band: groups[band] for band in FULL_TENURE_ORDER if band in groups}
