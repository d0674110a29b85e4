"""Elias unary, gamma and delta codes for positive integers.

Codes are returned as ``(word, length)`` where bit ``j`` of ``word`` (least
significant first) is the ``j``-th bit of the code. Code bits are laid out
so that they can be read in increasing bit position.
"""

from __future__ import annotations


def _check_positive(n: int) -> None:
    if n < 1:
        raise ValueError(f"Elias codes need a positive integer, got {n}")


def unary(n: int) -> tuple[int, int]:
    """Encode ``n`` as ``n - 1`` zero bits followed by a one bit."""
    _check_positive(n)
    return 1 << (n - 1), n


def _append_low_bits(word: int, length: int, value: int, width: int) -> tuple[int, int]:
    # Append the bits of value below its leading one, most significant first.
    for i in range(width - 2, -1, -1):
        word |= ((value >> i) & 1) << length
        length += 1
    return word, length


def gamma(n: int) -> tuple[int, int]:
    """Elias gamma code: the bit length in unary, then the bits below the leading one."""
    _check_positive(n)
    width = n.bit_length()
    word, length = unary(width)
    return _append_low_bits(word, length, n, width)


def delta(n: int) -> tuple[int, int]:
    """Elias delta code: the bit length in gamma, then the bits below the leading one."""
    _check_positive(n)
    width = n.bit_length()
    word, length = gamma(width)
    return _append_low_bits(word, length, n, width)


def read_gamma(bits: int, i: int = 0) -> tuple[int, int]:
    """Decode one gamma code starting at bit ``i`` of ``bits``.

    Returns the value and the number of bits consumed.
    """
    if i < 0:
        raise ValueError("start position must be non-negative")
    rest = bits >> i
    if rest == 0:
        raise ValueError(f"no gamma code starts at bit {i}")
    zeros = (rest & -rest).bit_length() - 1
    width = zeros + 1
    value = 1
    for k in range(1, width):
        value = (value << 1) | ((rest >> (zeros + k)) & 1)
    return value, 2 * width - 1