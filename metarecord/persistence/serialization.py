# ==============================================
# Meta Value Serialization
# ==============================================
#
# PURPOSE:
#   meta_value is a text column. Everything written to it goes
#   through encode_meta_value(); nothing is decoded on read.
#
# RULES:
# ------
#   None            → NULL
#   str             → unchanged
#   bool            → "1" / "0"
#   int, float      → str(value)
#   bytes           → utf-8 text (ValueError if not valid utf-8)
#   anything else   → JSON (dicts, lists, tuples, dataclasses via to_dict())
#
#   decode_json_value(text) is the explicit inverse for composite
#   values. Callers that wrote a dict call it themselves.
#
# ==============================================

import json
from typing import Any, Mapping, Optional, Sequence, Union

Scalar = Union[str, int, float, bool]
MetaValue = Union[Scalar, None, bytes, Mapping[str, Any], Sequence[Any]]


def encode_meta_value(value: MetaValue) -> Optional[str]:
    """
    Convert a meta value to the text stored in meta_value.

    Args:
        value: Value as set by the caller

    Returns:
        Text representation, or None for NULL
    """
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValueError(f"meta bytes values must be valid UTF-8: {e}") from e
    if hasattr(value, "to_dict"):
        value = value.to_dict()
    return json.dumps(value, default=str, ensure_ascii=False)


def decode_json_value(text: Optional[str]) -> Any:
    """Parse text written for a composite value back into Python objects."""
    if text is None:
        return None
    return json.loads(text)
