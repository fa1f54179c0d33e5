"""8-bit floating-point codec used by the ADD2 instruction.

Bit layout::

    7    6..4       3..0
    sign exponent   mantissa

The exponent is stored with a bias of 4 and the mantissa is a plain binary
fraction with no hidden leading bit, so a byte decodes to
``(-1)**sign * mantissa / 16 * 2**(exponent - 4)``.
"""

import math

EXPONENT_BIAS = 4
MIN_EXPONENT = -EXPONENT_BIAS
MAX_EXPONENT = 7 - EXPONENT_BIAS
MAX_MAGNITUDE = 0x7F


def decode(byte: int) -> float:
    """Decode a mini-float byte to a Python float."""
    sign = (byte >> 7) & 0x1
    exponent = (byte >> 4) & 0x7
    mantissa = byte & 0xF
    magnitude = (mantissa / 16.0) * 2.0 ** (exponent - EXPONENT_BIAS)
    return -magnitude if sign else magnitude


def encode(value: float) -> int:
    """Encode a Python float as a mini-float byte.

    The mantissa is truncated, not rounded. Magnitudes too large for the
    format saturate to the largest representable value; magnitudes too small
    for a normalized mantissa are stored with the minimum exponent.
    """
    if math.isnan(value):
        raise ValueError("Cannot encode NaN as a mini-float")

    sign = 0x80 if value < 0 else 0x00
    value = abs(value)

    exponent = 0
    while value >= 1.0 and exponent <= MAX_EXPONENT:
        value /= 2.0
        exponent += 1
    if exponent > MAX_EXPONENT:
        return sign | MAX_MAGNITUDE

    while value < 0.5 and exponent > MIN_EXPONENT:
        value *= 2.0
        exponent -= 1

    biased = (exponent + EXPONENT_BIAS) & 0x7
    mantissa = int(math.floor(value * 16)) & 0xF
    return sign | (biased << 4) | mantissa
