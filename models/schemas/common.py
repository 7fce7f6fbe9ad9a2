from datetime import datetime

from marshmallow import fields


def utc_isoformat(value: datetime) -> str:
    """Naive UTC datetime as ISO 8601 with a trailing Z."""
    return value.isoformat() + "Z"


class UTCDateTime(fields.DateTime):
    """Output-only DateTime for the naive UTC values our columns hold."""

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        return utc_isoformat(value)
