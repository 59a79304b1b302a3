"""Public interface for the ``cheque_ras`` package.

Re-exports the calendar helpers, the normalizers, the averaging engine, the
worksheet and the public models. There is no runtime logic here.
"""

from .engine import compute_ras, round_half_away_from_zero
from .jalali import (
    add_days,
    format_date,
    from_day_index,
    from_gregorian,
    is_leap_year,
    is_valid_date,
    month_length,
    parse_date_string,
    to_day_index,
    to_gregorian,
    today,
)
from .models import (
    AggregateResult,
    CalendarDate,
    ChequeRecord,
    DateStatus,
    ExtractedCheque,
    NormalizedRecord,
    RasComputation,
)
from .normalizers import (
    classify_date,
    format_amount,
    normalize_date_input,
    normalize_digits,
    parse_amount,
    shape_date_input,
)
from .worksheet import ChequeWorksheet

__all__ = [
    # Engine
    "compute_ras",
    "round_half_away_from_zero",
    # Calendar
    "add_days",
    "format_date",
    "from_day_index",
    "from_gregorian",
    "is_leap_year",
    "is_valid_date",
    "month_length",
    "parse_date_string",
    "to_day_index",
    "to_gregorian",
    "today",
    # Normalizers
    "classify_date",
    "format_amount",
    "normalize_date_input",
    "normalize_digits",
    "parse_amount",
    "shape_date_input",
    # Worksheet
    "ChequeWorksheet",
    # Models / types
    "AggregateResult",
    "CalendarDate",
    "ChequeRecord",
    "DateStatus",
    "ExtractedCheque",
    "NormalizedRecord",
    "RasComputation",
]
