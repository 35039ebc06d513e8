"""
Prime-field arithmetic.

Elements are plain Python ``int`` values in ``[0, p)``.  A ``PrimeField``
instance carries the modulus together with the sizes the codecs need.
Inversion, Legendre symbols and square roots come from
``ecdsa.numbertheory``; this module adds batch inversion, RFC 9380 ``sgn0``
and reduction of byte strings.

The same class is used for the base field of a curve (coordinates) and for
its scalar field (the prime subgroup order).
"""

from __future__ import annotations

import secrets
from typing import Callable, List, Optional, Sequence

from ecdsa import numbertheory

RandomSource = Callable[[int], bytes]


class PrimeField:
    """The field  F_p  for an odd prime *p*."""

    __slots__ = ("modulus", "bits", "byte_len")

    def __init__(self, modulus: int) -> None:
        if modulus < 3 or modulus % 2 == 0:
            raise ValueError("modulus must be an odd prime")
        self.modulus = modulus
        self.bits = modulus.bit_length()
        self.byte_len = (self.bits + 7) // 8

    # reduction --------------------------------------------------------------
    def __call__(self, value: int) -> int:
        return value % self.modulus

    def from_le_bytes_mod_order(self, data: bytes) -> int:
        """Interpret *data* as a little-endian integer and reduce mod p."""
        return int.from_bytes(data, "little") % self.modulus

    def from_be_bytes_mod_order(self, data: bytes) -> int:
        """Interpret *data* as a big-endian integer and reduce mod p."""
        return int.from_bytes(data, "big") % self.modulus

    def to_le_bytes(self, value: int) -> bytes:
        return value.to_bytes(self.byte_len, "little")

    def to_be_bytes(self, value: int) -> bytes:
        return value.to_bytes(self.byte_len, "big")

    def random(self, rng: Optional[RandomSource] = None) -> int:
        """Uniform in [1, p-1] via rejection sampling."""
        fill = rng or secrets.token_bytes
        mask = (1 << self.bits) - 1
        while True:
            c = int.from_bytes(fill(self.byte_len), "big") & mask
            if 0 < c < self.modulus:
                return c

    # arithmetic -------------------------------------------------------------
    def inv(self, value: int) -> int:
        """Multiplicative inverse."""
        value %= self.modulus
        if value == 0:
            raise ZeroDivisionError("cannot invert zero")
        return int(numbertheory.inverse_mod(value, self.modulus))

    def batch_inverse(self, values: Sequence[int]) -> List[int]:
        """
        Invert a list of non-zero elements using a single inversion
        (Montgomery's trick).

        Cost: 3(n-1) multiplications + 1 inversion  vs  n inversions naïvely.

        Raises ``ZeroDivisionError`` if any element is zero.
        """
        n = len(values)
        if n == 0:
            return []
        p = self.modulus
        prefix = [0] * n
        acc = 1
        for i, v in enumerate(values):
            acc = acc * v % p
            prefix[i] = acc
        inv_all = self.inv(acc)
        result = [0] * n
        for i in range(n - 1, 0, -1):
            result[i] = prefix[i - 1] * inv_all % p
            inv_all = inv_all * values[i] % p
        result[0] = inv_all
        return result

    def is_square(self, value: int) -> bool:
        """Legendre symbol test (zero counts as a square)."""
        return numbertheory.jacobi(value % self.modulus, self.modulus) != -1

    def sqrt(self, value: int) -> Optional[int]:
        """
        A square root of *value*, or ``None`` for non-residues.

        Which of the two roots is returned is unspecified; callers pick the
        sign they need.
        """
        try:
            return int(numbertheory.square_root_mod_prime(value % self.modulus,
                                                          self.modulus))
        except numbertheory.SquareRootError:
            return None

    def sgn0(self, value: int) -> int:
        """RFC 9380 ``sgn0`` for prime fields: the parity of the element."""
        return (value % self.modulus) & 1

    def __repr__(self) -> str:
        h = hex(self.modulus)
        return f"PrimeField({h[:10]}…, bits={self.bits})"
