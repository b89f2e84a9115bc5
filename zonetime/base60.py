"""Base-60 number codec used by packed zone records.

Digits are ``0-9``, ``a-z`` (10-35) and ``A-X`` (36-59); a ``.`` starts
the fractional part and a leading ``-`` makes the number negative.
"""

from __future__ import annotations

import math
from typing import List, Union

BASE60 = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWX"
EPSILON = 0.000001

Number = Union[int, float]


def char_to_int(char: str) -> int:
    code = ord(char)
    if code > 96:
        return code - 87
    if code > 64:
        return code - 29
    return code - 48


def unpack_base60(text: str) -> Number:
    """Decode one base-60 number; an empty string decodes to 0."""
    sign = 1
    whole, _, fractional = text.partition(".")
    if whole.startswith("-"):
        sign = -1
        whole = whole[1:]

    out: Number = 0
    for char in whole:
        out = 60 * out + char_to_int(char)

    multiplier = 1.0
    for char in fractional:
        multiplier /= 60
        out += char_to_int(char) * multiplier

    return out * sign


def unpack_list(text: str, separator: str = " ") -> List[Number]:
    if separator:
        return [unpack_base60(part) for part in text.split(separator)]
    return [unpack_base60(char) for char in text]


def _pack_fraction(fraction: float, precision: int) -> str:
    buffer = "."
    output = ""
    while precision > 0:
        precision -= 1
        fraction *= 60
        current = min(int(math.floor(fraction + EPSILON)), 59)
        buffer += BASE60[current]
        fraction -= current
        # Trailing zero digits are dropped
        if current:
            output += buffer
            buffer = ""
    return output


def pack_base60(number: Number, precision: int = 0) -> str:
    """Encode `number` keeping at most `precision` fractional digits (max 10)."""
    absolute = abs(number)
    whole = int(math.floor(absolute))
    fraction = _pack_fraction(absolute - whole, min(int(precision), 10))

    output = ""
    while whole > 0:
        output = BASE60[whole % 60] + output
        whole //= 60

    if number < 0:
        output = "-" + output
    if output and fraction:
        return output + fraction
    if not fraction and output == "-":
        return "0"
    return output or fraction or "0"
