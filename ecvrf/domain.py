"""
Evaluation domains and dense polynomials over a prime field.

A polynomial is a list of coefficients, lowest degree first, each a plain
``int`` reduced modulo p.  ``Domain`` is the multiplicative subgroup

    H = { ω^0, ω^1, …, ω^(n−1) },   ω a primitive n-th root of unity,

for a power-of-two n, with radix-2 FFTs between coefficient form and
evaluations over H (or over a coset g·H).

References
----------
- Cooley, Tukey (1965). "An Algorithm for the Machine Calculation of
  Complex Fourier Series."
- Gabizon, Williamson, Ciobotaru (2019). "PLONK", ePrint 2019/953, §4.
"""

from __future__ import annotations

from typing import List, Sequence

from .field import PrimeField

Poly = List[int]


def _fft(values: Sequence[int], root: int, p: int) -> List[int]:
    """In-order iterative radix-2 FFT:  out[i] = Σ_j values[j]·root^(i·j)."""
    n = len(values)
    a = list(values)
    j = 0
    for i in range(1, n):
        bit = n >> 1
        while j & bit:
            j ^= bit
            bit >>= 1
        j |= bit
        if i < j:
            a[i], a[j] = a[j], a[i]
    length = 2
    while length <= n:
        half = length >> 1
        step = pow(root, n // length, p)
        twiddles = [1] * half
        for k in range(1, half):
            twiddles[k] = twiddles[k - 1] * step % p
        for start in range(0, n, length):
            for k in range(half):
                lo = start + k
                hi = lo + half
                v = a[hi] * twiddles[k] % p
                a[hi] = (a[lo] - v) % p
                a[lo] = (a[lo] + v) % p
        length <<= 1
    return a


class Domain:
    """
    The subgroup of n-th roots of unity in *field*.

    *generator* must generate the whole multiplicative group; it fixes
    ω = generator^((p−1)/n) and doubles as the coset offset.
    """

    def __init__(self, field: PrimeField, size: int, generator: int) -> None:
        p = field.modulus
        if size < 2 or size & (size - 1):
            raise ValueError(f"domain size {size} is not a power of two")
        if (p - 1) % size:
            raise ValueError(f"no subgroup of order {size} in the field")
        omega = pow(generator, (p - 1) // size, p)
        if pow(omega, size // 2, p) != p - 1:
            raise ValueError("generator does not give a primitive root of unity")
        self.field = field
        self.size = size
        self.generator = generator % p
        self.omega = omega
        self.omega_inv = field.inv(omega)
        self.size_inv = field.inv(size)

    def element(self, i: int) -> int:
        """ω^i."""
        return pow(self.omega, i % self.size, self.field.modulus)

    # transforms -------------------------------------------------------------
    def _pad(self, values: Sequence[int]) -> List[int]:
        if len(values) > self.size:
            raise ValueError(f"{len(values)} values do not fit a domain of {self.size}")
        return list(values) + [0] * (self.size - len(values))

    def fft(self, coeffs: Sequence[int]) -> List[int]:
        """Evaluations over the domain, in the order ω^0 … ω^(n−1)."""
        return _fft(self._pad(coeffs), self.omega, self.field.modulus)

    def ifft(self, evals: Sequence[int]) -> Poly:
        """Interpolate: the unique polynomial of degree < n through *evals*."""
        p = self.field.modulus
        out = _fft(self._pad(evals), self.omega_inv, p)
        return [c * self.size_inv % p for c in out]

    def coset_fft(self, coeffs: Sequence[int]) -> List[int]:
        """Evaluations over  g·H  with g the domain's generator."""
        p = self.field.modulus
        scaled = []
        k = 1
        for c in self._pad(coeffs):
            scaled.append(c * k % p)
            k = k * self.generator % p
        return _fft(scaled, self.omega, p)

    def coset_ifft(self, evals: Sequence[int]) -> Poly:
        p = self.field.modulus
        coeffs = self.ifft(evals)
        g_inv = self.field.inv(self.generator)
        k = 1
        for i, c in enumerate(coeffs):
            coeffs[i] = c * k % p
            k = k * g_inv % p
        return coeffs

    def coset_elements(self) -> List[int]:
        p = self.field.modulus
        out = [self.generator]
        for _ in range(self.size - 1):
            out.append(out[-1] * self.omega % p)
        return out

    # closed-form evaluations ------------------------------------------------
    def vanishing_eval(self, z: int) -> int:
        """Z_H(z) = z^n − 1."""
        p = self.field.modulus
        return (pow(z, self.size, p) - 1) % p

    def lagrange_eval(self, i: int, z: int) -> int:
        """L_i(z) = ω^i·(z^n − 1) / (n·(z − ω^i))."""
        p = self.field.modulus
        wi = self.element(i)
        if (z - wi) % p == 0:
            return 1
        num = wi * self.vanishing_eval(z) % p
        return num * self.field.inv(self.size * (z - wi)) % p

    def __repr__(self) -> str:
        return f"Domain(size={self.size})"


# ── coefficient-form helpers ────────────────────────────────────────────
def poly_eval(coeffs: Sequence[int], z: int, p: int) -> int:
    """Horner evaluation."""
    acc = 0
    for c in reversed(coeffs):
        acc = (acc * z + c) % p
    return acc


def poly_divide_linear(coeffs: Sequence[int], z: int, p: int) -> Poly:
    """(f(X) − f(z)) / (X − z) by synthetic division."""
    n = len(coeffs)
    if n < 2:
        return []
    out = [0] * (n - 1)
    acc = 0
    for i in range(n - 1, 0, -1):
        acc = (acc * z + coeffs[i]) % p
        out[i - 1] = acc
    return out


def poly_combine(polys: Sequence[Sequence[int]], weights: Sequence[int], p: int) -> Poly:
    """Σ weights[i]·polys[i]."""
    out = [0] * max((len(f) for f in polys), default=0)
    for f, w in zip(polys, weights):
        for i, c in enumerate(f):
            out[i] = (out[i] + w * c) % p
    return out
