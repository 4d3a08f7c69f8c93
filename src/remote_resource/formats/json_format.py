import base64
import datetime
import decimal
import json
import typing

from .base import Format


class ResourceJSONEncoder(json.JSONEncoder):
    def default(self, o: typing.Any) -> typing.Any:
        to_dict = getattr(o, "to_dict", None)
        if callable(to_dict):
            return to_dict()
        if isinstance(o, (datetime.datetime, datetime.date, datetime.time)):
            return o.isoformat()
        if isinstance(o, decimal.Decimal):
            return str(o)
        if isinstance(o, (bytes, bytearray)):
            return base64.b64encode(o).decode("ascii")
        if isinstance(o, (set, frozenset)):
            return list(o)
        return super().default(o)


class JSONFormat(Format):
    extension = "json"
    mime_type = "application/json"

    def encode(
        self, value: typing.Any, root: typing.Optional[str] = None, **options: typing.Any
    ) -> str:
        if root:
            value = {root: value}
        return json.dumps(value, cls=ResourceJSONEncoder, **options)

    def _decode(self, data: str) -> typing.Any:
        if not data.strip():
            return None
        return json.loads(data)
