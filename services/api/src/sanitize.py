"""Recursive converters between request JSON and DynamoDB item values."""
import re
from decimal import Decimal
from typing import Any

_CONTROL_CHAR_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def sanitize(obj: Any) -> Any:
    """Strip codepoints 0x00-0x08, 0x0B, 0x0C, 0x0E-0x1F from all strings.

    Also converts ``Decimal`` (returned by DynamoDB) to ``int``/``float``.
    Preserves \\t (0x09), \\n (0x0A), and \\r (0x0D) which are legal in JSON.
    """
    if isinstance(obj, str):
        return _CONTROL_CHAR_RE.sub("", obj)
    if isinstance(obj, dict):
        return {k: sanitize(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [sanitize(v) for v in obj]
    if isinstance(obj, Decimal):
        return int(obj) if obj == int(obj) else float(obj)
    return obj


def to_dynamo(obj: Any) -> Any:
    """Make a JSON-like value storable: floats become ``Decimal``, tuples lists."""
    if isinstance(obj, bool) or obj is None:
        return obj
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {str(k): to_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_dynamo(v) for v in obj]
    return obj
