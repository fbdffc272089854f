"""Field name cleaning and value flattening for raw device records.

Raw keys carry vendor unit suffixes and punctuation:

    "Temperature_CHIP-0.1°C" -> "temperature_chip"
    "Vibration_X-mm/s"       -> "vibration_x"
    "Humidity-RH%"           -> "humidity"

Everything here is pure and total: unexpected input is dropped, never raised.
"""

import math
import re
from typing import Any, Dict, Union

_UNIT_SUFFIX_RE = re.compile(r"-[0-9.]*[°%a-zA-Z/]+$")
_INVALID_CHARS_RE = re.compile(r"[^a-zA-Z0-9_]")
_UNDERSCORES_RE = re.compile(r"_+")


def clean_field_name(name: str) -> str:
    """Strip the unit suffix and reduce a raw key to [a-z0-9_]."""
    name = _UNIT_SUFFIX_RE.sub("", name)
    name = _INVALID_CHARS_RE.sub("_", name)
    name = _UNDERSCORES_RE.sub("_", name)
    if name.endswith("_"):
        name = name[:-1]
    return name.lower()


def is_number(value: Any) -> bool:
    # JSON true/false decode to bool, which is an int subclass
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def classify_number(value: Union[int, float]) -> Union[int, float]:
    """Return an int for integral values and a float otherwise.

    Decided per value: 3 is an integer and 3.5 a float even for the same field.
    """
    if isinstance(value, int):
        return value
    if math.isfinite(value) and value.is_integer():
        return int(value)
    return value


def flatten_field(key: str, value: Any) -> Dict[str, Union[int, float, str]]:
    """Expand one raw key/value pair into canonical field names.

    Numbers keep the cleaned name, strings get a "_str" suffix. Multi-value
    objects such as {"value0": 12, "value1": -3} become one field per entry,
    indexed by the sub-key with its "value" prefix removed. Arrays are
    indexed by position.
    """
    clean_key = clean_field_name(key)
    result: Dict[str, Union[int, float, str]] = {}

    if value is None:
        return result

    if isinstance(value, (dict, list)):
        if isinstance(value, dict):
            entries = [(sub_key.replace("value", "", 1), v) for sub_key, v in value.items()]
        else:
            entries = [(str(i), v) for i, v in enumerate(value)]
        for index, sub_value in entries:
            if is_number(sub_value):
                result[f"{clean_key}_{index}"] = sub_value
            elif isinstance(sub_value, str):
                result[f"{clean_key}_str_{index}"] = sub_value
    elif is_number(value):
        result[clean_key] = value
    elif isinstance(value, str):
        result[f"{clean_key}_str"] = value

    return result
