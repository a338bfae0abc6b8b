import decimal
import json
from datetime import date, datetime
from typing import Any

from customresource import config


class CustomEncoder(json.JSONEncoder):
    """JSON encoder for the values provisioning functions commonly put into the ``Data`` of a status report."""

    def default(self, o):
        if isinstance(o, decimal.Decimal):
            return int(o) if o == o.to_integral_value() else float(o)
        if isinstance(o, datetime):
            return o.isoformat(timespec="milliseconds")
        if isinstance(o, date):
            return o.isoformat()
        if isinstance(o, bytes):
            return o.decode(config.DEFAULT_ENCODING, errors="replace")
        if isinstance(o, (set, frozenset, tuple)):
            return list(o)
        return super().default(o)


def json_dumps(doc: Any, **kwargs) -> bytes:
    """Serializes the given document with the ``CustomEncoder`` into encoded JSON bytes."""
    return json.dumps(doc, cls=CustomEncoder, **kwargs).encode(config.DEFAULT_ENCODING)
