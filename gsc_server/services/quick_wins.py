"""
Quick Wins Detection Service

This module finds SEO "quick wins" in Search Analytics rows: query+page pairs
with plenty of impressions and a first-page rank, but a click-through rate
low enough that better titles or content would likely earn more clicks.

Detection per row:
1. ctr (fraction) is converted to a percentage
2. The row is kept when impressions >= minImpressions, ctr% <= maxCtr and
   positionRangeMin <= position <= positionRangeMax
3. potentialClicks = round(impressions * targetCtr / 100)
   additionalClicks = max(0, potentialClicks - clicks)
4. estimatedValue = round2(additionalClicks * estimatedClickValue * (1 + conversionRate))
5. Opportunity tier from additionalClicks: >= 100 High, >= 25 Medium, else Low
6. A recommendation assembled from position, CTR and volume advice

Results are ordered by additionalClicks descending. The sort is stable, so
rows with equal additionalClicks keep their upstream order.

Note on estimatedValue: conversionRate is applied as a multiplicative uplift
on click value (1 + conversionRate), not as a probability on the additional
clicks. The heuristic is kept exactly as-is.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd

from gsc_server.models.enums import OpportunityLevel
from gsc_server.models.schemas import (
    QuickWin,
    QuickWinsReport,
    QuickWinsSummary,
    QuickWinsSummaryThresholds,
    QuickWinsThresholds,
)
from gsc_server.services.normalization import (
    RowLike,
    dimension_value,
    format_number,
    round_half_up,
    round_half_up_series,
    rows_to_frame,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# Additional-clicks cut-offs for the opportunity tier (fixed, not configurable)
HIGH_OPPORTUNITY_MIN_CLICKS = 100
MEDIUM_OPPORTUNITY_MIN_CLICKS = 25

# Recommendation position bands
UPPER_BAND_MIN_POSITION = 4
UPPER_BAND_MAX_POSITION = 6
LOWER_BAND_MAX_POSITION = 10

# Below this CTR percentage the snippet itself is the likely problem
LOW_CTR_PERCENT = 1

HIGH_VOLUME_IMPRESSIONS = 1000

RECOMMENDATION_UPPER_BAND = "Improve content depth and relevance to reach top 3"
RECOMMENDATION_LOWER_BAND = "Focus on on-page SEO and internal linking"
RECOMMENDATION_LOW_CTR = "Optimize title tag and meta description for higher CTR"
RECOMMENDATION_HIGH_VOLUME = "High-volume keyword - prioritize optimization"
RECOMMENDATION_FALLBACK = "Review content for optimization opportunities"

ThresholdsLike = Union[QuickWinsThresholds, Mapping[str, Any]]


# =============================================================================
# Classification Helpers
# =============================================================================


def resolve_thresholds(thresholds: Optional[ThresholdsLike] = None) -> QuickWinsThresholds:
    """
    Build a full threshold profile from a partial override.

    Accepts a QuickWinsThresholds instance, a mapping holding any subset of
    its fields, or None for all defaults.
    """
    if thresholds is None:
        return QuickWinsThresholds()
    if isinstance(thresholds, QuickWinsThresholds):
        return thresholds
    return QuickWinsThresholds.model_validate(dict(thresholds))


def classify_opportunity(additional_clicks: int) -> OpportunityLevel:
    """Map additional clicks potential to a High/Medium/Low tier."""
    if additional_clicks >= HIGH_OPPORTUNITY_MIN_CLICKS:
        return OpportunityLevel.HIGH
    elif additional_clicks >= MEDIUM_OPPORTUNITY_MIN_CLICKS:
        return OpportunityLevel.MEDIUM
    else:
        return OpportunityLevel.LOW


def generate_recommendation(position: float, ctr_percent: float, impressions: float) -> str:
    """
    Build actionable advice from the unrounded row metrics.

    Args:
        position: Average position (1 = top)
        ctr_percent: Click-through rate as a percentage
        impressions: Impression count

    Returns:
        Applicable advice fragments joined with ". ", or a generic fallback
    """
    recommendations: List[str] = []

    if UPPER_BAND_MIN_POSITION <= position <= UPPER_BAND_MAX_POSITION:
        recommendations.append(RECOMMENDATION_UPPER_BAND)
    elif UPPER_BAND_MAX_POSITION < position <= LOWER_BAND_MAX_POSITION:
        recommendations.append(RECOMMENDATION_LOWER_BAND)

    if ctr_percent < LOW_CTR_PERCENT:
        recommendations.append(RECOMMENDATION_LOW_CTR)

    if impressions >= HIGH_VOLUME_IMPRESSIONS:
        recommendations.append(RECOMMENDATION_HIGH_VOLUME)

    return ". ".join(recommendations) if recommendations else RECOMMENDATION_FALLBACK


def estimate_value(additional_clicks: int, thresholds: QuickWinsThresholds) -> float:
    """Monetary value of the additional clicks, rounded to cents."""
    raw_value = additional_clicks * thresholds.estimatedClickValue * (1 + thresholds.conversionRate)
    return round_half_up(raw_value, 2)


# =============================================================================
# Detection
# =============================================================================


def select_candidates(frame: pd.DataFrame, thresholds: QuickWinsThresholds) -> pd.DataFrame:
    """
    Filter a normalized row frame down to quick win candidates.

    Adds the derived columns ctrPercent, potentialClicks and additionalClicks.
    The input frame is not modified and row order is preserved.
    """
    ctr_percent = frame["ctr"] * 100
    mask = (
        (frame["impressions"] >= thresholds.minImpressions)
        & (ctr_percent <= thresholds.maxCtr)
        & (frame["position"] >= thresholds.positionRangeMin)
        & (frame["position"] <= thresholds.positionRangeMax)
    )

    candidates = frame.loc[mask].copy()
    candidates["ctrPercent"] = ctr_percent[mask]
    candidates["potentialClicks"] = round_half_up_series(
        candidates["impressions"] * thresholds.targetCtr / 100
    )
    candidates["additionalClicks"] = (
        candidates["potentialClicks"] - candidates["clicks"]
    ).clip(lower=0)
    return candidates


def build_quick_win(record: Dict[str, Any], thresholds: QuickWinsThresholds) -> QuickWin:
    """Create a QuickWin from one candidate record produced by select_candidates."""
    additional_clicks = int(record["additionalClicks"])

    return QuickWin(
        query=dimension_value(record["keys"], 0),
        page=dimension_value(record["keys"], 1),
        currentPosition=round_half_up(record["position"], 1),
        impressions=int(record["impressions"]),
        currentClicks=int(record["clicks"]),
        currentCtr=round_half_up(record["ctrPercent"], 2),
        potentialClicks=int(record["potentialClicks"]),
        additionalClicks=additional_clicks,
        estimatedValue=estimate_value(additional_clicks, thresholds),
        opportunity=classify_opportunity(additional_clicks),
        recommendation=generate_recommendation(
            record["position"], record["ctrPercent"], record["impressions"]
        ),
    )


def detect_quick_wins(
    rows: Iterable[RowLike],
    thresholds: Optional[ThresholdsLike] = None,
) -> List[QuickWin]:
    """
    Detect quick win opportunities in Search Analytics rows.

    Missing measures on a row count as 0, so malformed rows are excluded by
    the thresholds rather than raising. An empty row set yields an empty list.

    Args:
        rows: Rows from a query,page Search Analytics request
        thresholds: Full or partial threshold profile (defaults apply)

    Returns:
        QuickWin list ordered by additionalClicks descending (stable)
    """
    profile = resolve_thresholds(thresholds)
    frame = rows_to_frame(rows)
    if frame.empty:
        return []

    candidates = select_candidates(frame, profile)
    quick_wins = [
        build_quick_win(record, profile)
        for record in candidates.to_dict(orient="records")
    ]

    # sorted() is stable, including with reverse=True
    quick_wins = sorted(quick_wins, key=lambda win: win.additionalClicks, reverse=True)

    logger.info(f"Detected {len(quick_wins)} quick wins from {len(frame)} rows")
    return quick_wins


# =============================================================================
# Reporting
# =============================================================================


def build_quick_wins_report(
    quick_wins: List[QuickWin],
    thresholds: Optional[ThresholdsLike] = None,
) -> QuickWinsReport:
    """
    Wrap detected quick wins with summary totals and the thresholds used.

    totalEstimatedValue is the plain sum of the per-win values; it is not
    re-rounded.
    """
    profile = resolve_thresholds(thresholds)

    summary = QuickWinsSummary(
        totalOpportunities=len(quick_wins),
        totalAdditionalClicks=sum(win.additionalClicks for win in quick_wins),
        totalEstimatedValue=sum(win.estimatedValue for win in quick_wins),
        thresholds=QuickWinsSummaryThresholds(
            minImpressions=profile.minImpressions,
            maxCtr=profile.maxCtr,
            positionRange=(
                f"{format_number(profile.positionRangeMin)}-"
                f"{format_number(profile.positionRangeMax)}"
            ),
            targetCtr=profile.targetCtr,
        ),
    )

    return QuickWinsReport(quickWins=quick_wins, summary=summary, analysisComplete=True)


__all__ = [
    "HIGH_OPPORTUNITY_MIN_CLICKS",
    "MEDIUM_OPPORTUNITY_MIN_CLICKS",
    "resolve_thresholds",
    "classify_opportunity",
    "generate_recommendation",
    "estimate_value",
    "select_candidates",
    "build_quick_win",
    "detect_quick_wins",
    "build_quick_wins_report",
]
