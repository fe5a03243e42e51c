"""
Utility functions
"""
from .datetime_utils import to_utc_datetime, utc_now, isoformat_or_none
from .id_generator import generate_id, validate_id, get_id_type

__all__ = [
    'to_utc_datetime',
    'utc_now',
    'isoformat_or_none',
    'generate_id',
    'validate_id',
    'get_id_type',
]
