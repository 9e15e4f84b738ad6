"""Small helpers with no application dependencies."""

from taskboard.shared.utils.datetime import parse_date, parse_timestamp, utc_now, utc_now_iso
from taskboard.shared.utils.generators import generate_cuid

__all__ = ["generate_cuid", "parse_date", "parse_timestamp", "utc_now", "utc_now_iso"]
