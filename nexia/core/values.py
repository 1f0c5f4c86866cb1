from __future__ import annotations

import math
from typing import TypeAlias, Union

# JSON-like value stored under a note attribute. No null member.
AttributeValue: TypeAlias = Union[
    str,
    int,
    float,
    bool,
    list["AttributeValue"],
    dict[str, "AttributeValue"],
]


def validate_attribute_value(value: object, *, _path: str = "$") -> AttributeValue:
    """
    Check that ``value`` belongs to the attribute domain and return a
    detached copy of it (lists/dicts are copied recursively).

    Raises TypeError for anything outside str/number/bool/list/dict,
    including None, tuples and non-string dict keys. Non-finite floats are
    rejected too since they have no JSON spelling.
    """
    # bool is an int subclass
    if isinstance(value, (str, int)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise TypeError(f"{_path}: non-finite float {value!r}")
        return value
    if isinstance(value, list):
        return [validate_attribute_value(v, _path=f"{_path}[{i}]") for i, v in enumerate(value)]
    if isinstance(value, dict):
        out: dict[str, AttributeValue] = {}
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError(f"{_path}: attribute map keys must be str, got {type(k).__name__}")
            out[k] = validate_attribute_value(v, _path=f"{_path}.{k}")
        return out
    raise TypeError(f"{_path}: unsupported attribute value type {type(value).__name__}")
