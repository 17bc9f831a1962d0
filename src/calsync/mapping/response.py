"""
Meeting response labels used to prefix mirrored event subjects.
"""

from calsync.models import ResponseType
from calsync.models import UnmappedEnumValueError


def format_response(response_type: ResponseType) -> str:
    """Return the short display label for the owner's meeting response.

    Raises UnmappedEnumValueError for anything outside ResponseType rather
    than falling back to a default, which would mislabel the event.
    """
    match response_type:
        case ResponseType.ACCEPT:
            return "ACCEPTED"
        case ResponseType.DECLINE:
            return "DECLINED"
        case ResponseType.NO_RESPONSE_RECEIVED:
            return "UNRESPONDED"
        case ResponseType.TENTATIVE:
            return "TENTATIVE"
        case ResponseType.ORGANIZER:
            return "ORGANIZER"
        case ResponseType.UNKNOWN:
            return "UNKNOWN"
        case _:
            raise UnmappedEnumValueError(f"No label for response type {response_type!r}")
