"""
KZG polynomial commitments on ``py_ecc`` pairing groups.

Setup (universal reference string)
    [τ^0]₁, [τ^1]₁, …, [τ^(d)]₁   and   [1]₂, [τ]₂

Commit
    C = Σ c_i·[τ^i]₁ = [f(τ)]₁

Open at z
    W = [(f(τ) − f(z)) / (τ − z)]₁

Check
    e(C − f(z)·[1]₁ + z·W, [1]₂) = e(W, [τ]₂)

Any number of opening claims fold into one such equation with random
weights, so a batch costs two Miller loops and one final exponentiation.

Points are ``py_ecc`` projective triples.  Everything this module hands
out is normalized (z = 1, or the canonical point at infinity), so plain
tuple equality is point equality.

Wire format for G1 is the arkworks compressed form: little-endian *x*
with bit 7 of the last byte set for negative *y* and bit 6 for infinity.
G2 points are written uncompressed (x.c0 ‖ x.c1 ‖ y.c0 ‖ y.c1), with the
same infinity bit.

References
----------
- Kate, Zaverucha, Goldberg (2010). "Constant-Size Commitments to
  Polynomials and Their Applications."  ASIACRYPT 2010.
- Boneh, Drake, Fisch, Gabizon (2020). "Efficient polynomial commitment
  schemes for multiple points and polynomials."  ePrint 2020/081.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ecdsa import numbertheory
from py_ecc import optimized_bls12_381, optimized_bn128

from .domain import Domain, poly_divide_linear
from .errors import InvalidData
from .field import PrimeField, RandomSource

logger = logging.getLogger(__name__)

G1Point = Tuple  # projective (x, y, z) over FQ
G2Point = Tuple  # projective (x, y, z) over FQ2

_INFINITY = 0x40
_Y_NEGATIVE = 0x80


def _u64(n: int) -> bytes:
    return n.to_bytes(8, "little")


class PairingGroup:
    """G1, G2 and the pairing of one ``py_ecc`` curve."""

    def __init__(self, name: str, backend, fr_generator: int, g1_cofactor_one: bool) -> None:
        self.name = name
        self._b = backend
        self.scalar_field = PrimeField(backend.curve_order)
        self.base_field = PrimeField(backend.field_modulus)
        self.fr_generator = fr_generator
        self._g1_cofactor_one = g1_cofactor_one
        self.g1 = backend.G1
        self.g2 = backend.G2
        self.z1 = backend.Z1
        self.z2 = backend.Z2
        self.G1_ENCODED_LEN = (self.base_field.bits + 2 + 7) // 8
        self.G2_ENCODED_LEN = 4 * self.base_field.byte_len

    @property
    def order(self) -> int:
        return self.scalar_field.modulus

    # G1 arithmetic ----------------------------------------------------------
    def add(self, p: G1Point, q: G1Point) -> G1Point:
        return self._b.add(p, q)

    def neg(self, p: G1Point) -> G1Point:
        return self._b.neg(p)

    def mul(self, p: G1Point, k: int) -> G1Point:
        return self._b.multiply(p, k % self.order)

    def is_identity(self, p: G1Point) -> bool:
        return self._b.is_inf(p)

    def normalize(self, p: G1Point) -> G1Point:
        if self._b.is_inf(p):
            return self.z1
        x, y = self._b.normalize(p)
        return (x, y, x.one())

    def msm(self, points: Sequence[G1Point], scalars: Sequence[int]) -> G1Point:
        """
        Σ k_i·P_i by the bucket method (normalized result).

        Scalars are split into c-bit windows; per window every point is
        dropped into the bucket of its digit and the buckets are summed
        with a running total, so each window costs n + 2^(c+1) additions.
        """
        r = self.order
        add = self._b.add
        double = self._b.double
        terms = []
        for pt, k in zip(points, scalars):
            k %= r
            if k and not self._b.is_inf(pt):
                terms.append((pt, k))
        if not terms:
            return self.z1
        if len(terms) < 4:
            acc = self.z1
            for pt, k in terms:
                acc = add(acc, self._b.multiply(pt, k))
            return self.normalize(acc)

        c = max(2, len(terms).bit_length() - 3)
        mask = (1 << c) - 1
        top = max(k.bit_length() for _, k in terms)
        acc = None
        for shift in range(((top - 1) // c) * c, -1, -c):
            if acc is not None:
                for _ in range(c):
                    acc = double(acc)
            buckets: List[Optional[G1Point]] = [None] * mask
            for pt, k in terms:
                digit = (k >> shift) & mask
                if digit:
                    b = buckets[digit - 1]
                    buckets[digit - 1] = pt if b is None else add(b, pt)
            running = window = None
            for b in reversed(buckets):
                if b is not None:
                    running = b if running is None else add(running, b)
                if running is not None:
                    window = running if window is None else add(window, running)
            if window is not None:
                acc = window if acc is None else add(acc, window)
        return self.z1 if acc is None else self.normalize(acc)

    def batch_mul(self, base: G1Point, scalars: Sequence[int], window: int = 8) -> List[G1Point]:
        """k·base for every k, sharing one fixed-base window table."""
        r = self.order
        add = self._b.add
        rows = (r.bit_length() + window - 1) // window
        table = []
        row_base = base
        for _ in range(rows):
            row = [row_base]
            for _ in range((1 << window) - 2):
                row.append(add(row[-1], row_base))
            table.append(row)
            row_base = add(row[-1], row_base)
        mask = (1 << window) - 1
        out = []
        for k in scalars:
            k %= r
            acc = self.z1
            w = 0
            while k:
                digit = k & mask
                if digit:
                    acc = add(acc, table[w][digit - 1])
                k >>= window
                w += 1
            out.append(self.normalize(acc))
        return out

    # G2 ---------------------------------------------------------------------
    def g2_mul(self, p: G2Point, k: int) -> G2Point:
        q = self._b.multiply(p, k % self.order)
        if self._b.is_inf(q):
            return self.z2
        x, y = self._b.normalize(q)
        return (x, y, x.one())

    # pairing ----------------------------------------------------------------
    def pairing_product_is_one(self, pairs: Sequence[Tuple[G1Point, G2Point]]) -> bool:
        """Π e(P_i, Q_i) == 1, with a single final exponentiation."""
        b = self._b
        f = b.FQ12.one()
        for p, q in pairs:
            f = f * b.pairing(q, p, final_exponentiate=False)
        return b.final_exponentiate(f) == b.FQ12.one()

    # encoding ---------------------------------------------------------------
    def g1_encode(self, p: G1Point) -> bytes:
        n = self.G1_ENCODED_LEN
        if self._b.is_inf(p):
            buf = bytearray(n)
            buf[-1] |= _INFINITY
            return bytes(buf)
        x, y = self._b.normalize(p)
        q = self.base_field.modulus
        buf = bytearray(int(x).to_bytes(n, "little"))
        if int(y) > q - int(y):
            buf[-1] |= _Y_NEGATIVE
        return bytes(buf)

    def g1_decode(self, data: bytes) -> G1Point:
        """
        Decode a compressed G1 point.

        Raises
        ------
        InvalidData
            Wrong length, malformed flags, non-canonical *x*, no point with
            this *x*, or a point outside the prime-order subgroup.
        """
        n = self.G1_ENCODED_LEN
        if len(data) != n:
            raise InvalidData(f"need {n} G1 bytes, got {len(data)}")
        raw = bytearray(data)
        flags = raw[-1] & 0xC0
        raw[-1] &= 0x3F
        x = int.from_bytes(raw, "little")
        if flags & _INFINITY:
            if flags & _Y_NEGATIVE or x:
                raise InvalidData("malformed G1 point at infinity")
            return self.z1
        q = self.base_field.modulus
        if x >= q:
            raise InvalidData("non-canonical G1 coordinate")
        rhs = (x * x * x + int(self._b.b)) % q
        try:
            y = int(numbertheory.square_root_mod_prime(rhs, q))
        except numbertheory.SquareRootError:
            raise InvalidData("no G1 point with this x coordinate") from None
        if (y > q - y) != bool(flags & _Y_NEGATIVE):
            y = (q - y) % q
        pt = (self._b.FQ(x), self._b.FQ(y), self._b.FQ.one())
        if not self._g1_cofactor_one and not self._b.is_inf(self._b.multiply(pt, self.order)):
            raise InvalidData("G1 point not in the prime-order subgroup")
        return pt

    def g2_encode(self, p: G2Point) -> bytes:
        k = self.base_field.byte_len
        if self._b.is_inf(p):
            buf = bytearray(self.G2_ENCODED_LEN)
            buf[-1] |= _INFINITY
            return bytes(buf)
        x, y = self._b.normalize(p)
        return b"".join(int(c).to_bytes(k, "little") for c in (*x.coeffs, *y.coeffs))

    def g2_decode(self, data: bytes) -> G2Point:
        if len(data) != self.G2_ENCODED_LEN:
            raise InvalidData(f"need {self.G2_ENCODED_LEN} G2 bytes, got {len(data)}")
        k = self.base_field.byte_len
        raw = bytearray(data)
        if raw[-1] & _INFINITY:
            raw[-1] &= 0x3F
            if any(raw):
                raise InvalidData("malformed G2 point at infinity")
            return self.z2
        cs = [int.from_bytes(raw[i * k:(i + 1) * k], "little") for i in range(4)]
        if any(c >= self.base_field.modulus for c in cs):
            raise InvalidData("non-canonical G2 coordinate")
        FQ2 = self._b.FQ2
        pt = (FQ2(cs[0:2]), FQ2(cs[2:4]), FQ2.one())
        if not self._b.is_on_curve(pt, self._b.b2):
            raise InvalidData("G2 point not on the curve")
        if not self._b.is_inf(self._b.multiply(pt, self.order)):
            raise InvalidData("G2 point not in the prime-order subgroup")
        return pt

    def __repr__(self) -> str:
        return f"PairingGroup({self.name})"


BLS12_381 = PairingGroup("bls12_381", optimized_bls12_381, 7, g1_cofactor_one=False)
BN254 = PairingGroup("bn254", optimized_bn128, 5, g1_cofactor_one=True)


# ── reference string ────────────────────────────────────────────────────
@dataclass(frozen=True)
class KzgVerifierKey:
    """[1]₁, [1]₂ and [τ]₂: all a verifier needs from the setup."""

    group: PairingGroup
    g1: G1Point
    g2: G2Point
    tau_g2: G2Point


@dataclass(frozen=True)
class Urs:
    """
    Powers of a secret τ in G1 (as many as the largest committed
    polynomial has coefficients) and [1]₂, [τ]₂.

    ``truncate`` returns a new instance sharing the points.
    """

    group: PairingGroup
    powers_in_g1: Tuple[G1Point, ...]
    powers_in_g2: Tuple[G2Point, G2Point]

    @classmethod
    def setup(cls, group: PairingGroup, size: int, rng: RandomSource) -> Urs:
        """Fresh string with *size* G1 powers; τ is drawn from *rng* and dropped."""
        if size < 1:
            raise InvalidData("reference string size must be positive")
        r = group.order
        tau = group.scalar_field.random(rng)
        powers = [1] * size
        for i in range(1, size):
            powers[i] = powers[i - 1] * tau % r
        logger.debug("kzg setup on %s: %d powers", group.name, size)
        g1 = tuple(group.batch_mul(group.g1, powers))
        return cls(group, g1, (group.g2, group.g2_mul(group.g2, tau)))

    def __len__(self) -> int:
        return len(self.powers_in_g1)

    def truncate(self, size: int) -> Urs:
        if size > len(self):
            raise InvalidData(f"reference string has {len(self)} powers, {size} requested")
        return Urs(self.group, self.powers_in_g1[:size], self.powers_in_g2)

    def verifier_key(self) -> KzgVerifierKey:
        return KzgVerifierKey(self.group, self.powers_in_g1[0], *self.powers_in_g2)

    # commitments ------------------------------------------------------------
    def commit(self, coeffs: Sequence[int]) -> G1Point:
        if len(coeffs) > len(self):
            raise ValueError(
                f"polynomial with {len(coeffs)} coefficients exceeds {len(self)} powers"
            )
        return self.group.msm(self.powers_in_g1[:len(coeffs)], coeffs)

    def open(self, coeffs: Sequence[int], z: int) -> G1Point:
        """Opening proof  W = [(f(τ) − f(z)) / (τ − z)]₁."""
        return self.commit(poly_divide_linear(coeffs, z, self.group.order))

    def lagrangian(self, domain: Domain, start: int, stop: int) -> Optional[List[G1Point]]:
        """
        [L_i(τ)]₁ for  start ≤ i < stop  over *domain*, or ``None`` when
        the range or the domain does not fit this string.

        L_i(X) = n⁻¹ Σ_j (ω^(−i)·X)^j, so each entry is one MSM over the
        first n powers.
        """
        n = domain.size
        if start < 0 or stop > n or start > stop or n > len(self):
            return None
        p = domain.field.modulus
        bases = self.powers_in_g1[:n]
        out = []
        for i in range(start, stop):
            step = pow(domain.omega_inv, i, p)
            coeffs = [domain.size_inv] * n
            for j in range(1, n):
                coeffs[j] = coeffs[j - 1] * step % p
            out.append(self.group.msm(bases, coeffs))
        return out

    # serialization ----------------------------------------------------------
    def to_bytes(self) -> bytes:
        """le64(k) ‖ k compressed G1 powers ‖ le64(2) ‖ [1]₂ ‖ [τ]₂."""
        g = self.group
        return b"".join([
            _u64(len(self.powers_in_g1)),
            *(g.g1_encode(pt) for pt in self.powers_in_g1),
            _u64(len(self.powers_in_g2)),
            *(g.g2_encode(pt) for pt in self.powers_in_g2),
        ])

    @classmethod
    def from_bytes(cls, group: PairingGroup, data: bytes) -> Urs:
        n1 = group.G1_ENCODED_LEN
        n2 = group.G2_ENCODED_LEN
        if len(data) < 8:
            raise InvalidData("truncated reference string")
        k = int.from_bytes(data[:8], "little")
        g2_off = 8 + k * n1
        if len(data) != g2_off + 8 + 2 * n2:
            raise InvalidData("reference string length mismatch")
        if int.from_bytes(data[g2_off:g2_off + 8], "little") != 2:
            raise InvalidData("reference string must carry two G2 powers")
        g1 = tuple(group.g1_decode(data[8 + i * n1:8 + (i + 1) * n1]) for i in range(k))
        off = g2_off + 8
        g2 = tuple(group.g2_decode(data[off + i * n2:off + (i + 1) * n2]) for i in range(2))
        return cls(group, g1, g2)

    def __repr__(self) -> str:
        return f"Urs({self.group.name}, size={len(self)})"


# ── batched opening check ───────────────────────────────────────────────
class OpeningAccumulator:
    """
    Collects opening claims  (Σ k_j·C_j)(z) = v  with proof W, each scaled
    by a caller-chosen random weight, and resolves them with one pairing
    product:

        e(Σ w·(Σ k_j·C_j − v·[1]₁ + z·W), [1]₂) · e(−Σ w·W, [τ]₂) == 1
    """

    def __init__(self, vk: KzgVerifierKey) -> None:
        self.vk = vk
        self._lhs: List[Tuple[G1Point, int]] = []
        self._rhs: List[Tuple[G1Point, int]] = []
        self._g1_coeff = 0

    def add_claim(
        self,
        terms: Sequence[Tuple[G1Point, int]],
        value: int,
        z: int,
        proof: G1Point,
        weight: int,
    ) -> None:
        r = self.vk.group.order
        for c, k in terms:
            self._lhs.append((c, weight * k % r))
        self._g1_coeff = (self._g1_coeff - weight * value) % r
        self._lhs.append((proof, weight * z % r))
        self._rhs.append((proof, weight))

    def __len__(self) -> int:
        return len(self._rhs)

    def verify(self) -> bool:
        if not self._rhs:
            return True
        g = self.vk.group
        lhs = self._lhs + [(self.vk.g1, self._g1_coeff)]
        a = g.msm([pt for pt, _ in lhs], [k for _, k in lhs])
        b = g.msm([pt for pt, _ in self._rhs], [k for _, k in self._rhs])
        logger.debug("kzg batch: %d openings, %d-term MSM (%s)",
                     len(self._rhs), len(lhs), g.name)
        return g.pairing_product_is_one([(a, self.vk.g2), (g.neg(b), self.vk.tau_g2)])
