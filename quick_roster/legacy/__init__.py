from .adapter import format_legacy_datetime, transform_request, transform_response
from .client import AdapterError, LegacyRosterClient, RosterResult

__all__ = [
    "AdapterError",
    "LegacyRosterClient",
    "RosterResult",
    "format_legacy_datetime",
    "transform_request",
    "transform_response",
]
