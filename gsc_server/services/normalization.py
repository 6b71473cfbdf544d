"""
Row normalization helpers shared by the analytics services.

Search Analytics rows arrive as loosely-typed JSON objects where any measure
may be missing. These helpers put them into a DataFrame with every measure
present and numeric (missing or malformed values become 0), and provide the
rounding rules used for display values.

Rounding follows the conventions of the tool's JSON consumers:
- round_half_up(x) rounds .5 away from zero on the exact binary value, the
  same result as JavaScript's Number.prototype.toFixed for non-negative input
- Python's built-in round() is banker's rounding and is NOT used here
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, List, Mapping, Union

import numpy as np
import pandas as pd
from pydantic import BaseModel


# =============================================================================
# Constants
# =============================================================================

# Numeric measures on every Search Analytics row
ROW_MEASURES = ["clicks", "impressions", "ctr", "position"]

# Placeholder for a dimension value that upstream did not return
MISSING_KEY = "N/A"

RowLike = Union[BaseModel, Mapping[str, Any]]


# =============================================================================
# Row Framing
# =============================================================================


def _row_to_record(row: RowLike) -> dict:
    if isinstance(row, BaseModel):
        return row.model_dump()
    return dict(row)


def rows_to_frame(rows: Iterable[RowLike]) -> pd.DataFrame:
    """
    Build a DataFrame from Search Analytics rows with zero-defaulted measures.

    The frame always has a `keys` column plus one float column per measure in
    ROW_MEASURES. Input order is preserved in the index (0..n-1), which the
    detector relies on for stable tie ordering.

    Args:
        rows: Row models or plain mappings as returned upstream

    Returns:
        DataFrame with columns keys, clicks, impressions, ctr, position
    """
    records = [_row_to_record(row) for row in rows]
    frame = pd.DataFrame.from_records(records) if records else pd.DataFrame()
    frame = frame.reindex(columns=["keys"] + ROW_MEASURES)

    for col in ROW_MEASURES:
        frame[col] = pd.to_numeric(frame[col], errors="coerce").fillna(0).astype(float)

    return frame.reset_index(drop=True)


def dimension_value(keys: Any, index: int) -> str:
    """Return keys[index] as a string, or MISSING_KEY when it is absent."""
    if isinstance(keys, (list, tuple)) and len(keys) > index and keys[index] is not None:
        return str(keys[index])
    return MISSING_KEY


# =============================================================================
# Rounding
# =============================================================================


def round_half_up(value: float, places: int = 0) -> float:
    """Round to `places` decimals, halves away from zero."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(float(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_half_up_series(values: pd.Series) -> pd.Series:
    """Vectorized integer rounding, halves toward +infinity."""
    return np.floor(values + 0.5)


def format_number(value: float) -> str:
    """Format a number without a trailing '.0' when it is integral (4.0 -> '4')."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


__all__: List[str] = [
    "ROW_MEASURES",
    "MISSING_KEY",
    "rows_to_frame",
    "dimension_value",
    "round_half_up",
    "round_half_up_series",
    "format_number",
]
