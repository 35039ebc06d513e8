"""
Ring membership backend: a KZG-committed polynomial relation.

Proves that a key commitment  Y_b = P_j + b·H  hides one of the keys
P_0 … P_(k−1) of a committed ring, without saying which.  The ring
curve's base field is the scalar field of a pairing-friendly curve
(BLS12-381 for Bandersnatch, BN254 for Baby-JubJub), so ring points are
native field elements of the proof system.

Columns
    Over a domain of n = 2^m rows the last ``ZK_ROWS`` rows are random
    and constraints are enforced on the remaining rows only.

    fixed (committed once per ring)
        px, py   the ring keys padded to capacity with the padding point,
                 then 2^i·H for i < scalar_bits, then the identity
        sel      1 on key rows, 0 elsewhere
    witness
        b        one-hot choice of the prover's key, then the bits of b
        acc      A + Σ_{i<row} b_i·(px_i, py_i)   (A: accumulator base)
        ip       Σ_{i<row} sel_i·b_i

Constraints  (f' = f(ω·X),  last = n − ZK_ROWS − 1)
    b·(1 − b)
    (ip' − ip − sel·b)·(X − ω^last)
    conditional twisted Edwards addition acc' = acc + b·p with the
    dedicated formulas (no d term), times (X − ω^last):
        b·(acc_x'·(acc_y·py + a·acc_x·px) − (acc_x·acc_y + px·py)) + (1 − b)·(acc_x' − acc_x)
        b·(acc_y'·(acc_x·py − acc_y·px) − (acc_x·acc_y − px·py)) + (1 − b)·(acc_y' − acc_y)
    acc_0 = A,  ip_0 = 0,  acc_last = A + Y_b,  ip_last = 1

The constraints are folded with powers of a challenge α and divided by
the vanishing polynomial of the enforced rows, which has degree n − 3, so
the quotient has degree ≤ 3n: this is why a ring setup holds 3n + 1
powers.

Proof
    KZG commitments to b, acc_x, acc_y, ip and the quotient, the
    evaluations the verifier needs at ζ and ζ·ω, and one opening proof
    per point: a fixed size, whatever the ring size.

References
----------
- Burdges, Ciobotaru, Alper, Stewart, Vasilyev (2023). "Ring Verifiable
  Random Functions and Zero-Knowledge Continuations."  ePrint 2023/002.
- Hisil, Wong, Carter, Dawson (2008). "Twisted Edwards Curves Revisited."
  §3.1, dedicated addition.
- Gabizon, Williamson, Ciobotaru (2019). "PLONK", ePrint 2019/953.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import Callable, List, Optional, Sequence, Tuple

from .curve import Point
from .domain import Domain, Poly, poly_combine, poly_eval
from .errors import InvalidData
from .field import PrimeField
from .hash import (
    TAG_BATCH_WEIGHTS,
    TAG_RING_CHALLENGE,
    TAG_RING_NONCE,
    ChaCha20Rng,
    tagged_hash,
)
from .kzg import G1Point, KzgVerifierKey, OpeningAccumulator, Urs

logger = logging.getLogger(__name__)

SEED_LEN = 32
ZK_ROWS = 3

# witness columns, in commitment order
_WITNESS_LABELS = (b"bits", b"acc_x", b"acc_y", b"inner_prod")
_N_CONSTRAINTS = 10

SrsLookup = Callable[[int, int], Optional[List[G1Point]]]


def _u32(n: int) -> bytes:
    return n.to_bytes(4, "little")


def _powers(x: int, count: int, p: int) -> List[int]:
    out = [1] * count
    for i in range(1, count):
        out[i] = out[i - 1] * x % p
    return out


# ── setup ───────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class PcsParams:
    """KZG reference string on the suite's pairing curve."""

    suite: object
    urs: Urs

    @classmethod
    def setup(cls, suite, size: int, seed: bytes) -> PcsParams:
        """
        Reference string of *size* G1 powers with τ drawn from a ChaCha20
        stream seeded by *seed*.  Anyone who knows the seed knows τ, so
        seeded setups are for testing and reproducible fixtures.
        """
        if len(seed) != SEED_LEN:
            raise InvalidData(f"setup seed must be {SEED_LEN} bytes")
        return cls(suite, Urs.setup(suite.PAIRING, size, ChaCha20Rng(seed)))

    @property
    def size(self) -> int:
        return len(self.urs)

    def truncate(self, size: int) -> PcsParams:
        """The first *size* G1 powers of this setup."""
        return PcsParams(self.suite, self.urs.truncate(size))

    def raw_vk(self) -> KzgVerifierKey:
        return self.urs.verifier_key()

    def to_bytes(self) -> bytes:
        return self.urs.to_bytes()

    @classmethod
    def from_bytes(cls, suite, data: bytes) -> PcsParams:
        return cls(suite, Urs.from_bytes(suite.PAIRING, data))

    def __repr__(self) -> str:
        return f"PcsParams({self.suite.NAME}, size={self.size})"


@dataclass(frozen=True)
class PiopParams:
    """Domain, keyset capacity and the fixed points of the relation."""

    suite: object
    domain_size: int
    keyset_part_size: int

    @property
    def field(self) -> PrimeField:
        return self.suite.curve.base_field

    @property
    def scalar_bits(self) -> int:
        return self.suite.scalar_field.bits

    @property
    def capacity(self) -> int:
        return self.domain_size - ZK_ROWS

    @property
    def last_row(self) -> int:
        return self.capacity - 1

    @property
    def blinding_base(self) -> Point:
        return self.suite.BLINDING_BASE

    @property
    def accumulator_base(self) -> Point:
        return self.suite.ACCUMULATOR_BASE

    @property
    def padding_point(self) -> Point:
        return self.suite.PADDING

    @cached_property
    def domain(self) -> Domain:
        return Domain(self.field, self.domain_size, self.suite.PAIRING.fr_generator)

    @cached_property
    def quotient_domain(self) -> Domain:
        return Domain(self.field, 4 * self.domain_size, self.suite.PAIRING.fr_generator)

    @cached_property
    def h_powers(self) -> Tuple[Point, ...]:
        """2^i·H for i < scalar_bits."""
        out = [self.blinding_base]
        for _ in range(self.scalar_bits - 1):
            out.append(out[-1] + out[-1])
        return tuple(out)

    @cached_property
    def selector(self) -> Tuple[int, ...]:
        k = self.keyset_part_size
        return (1,) * k + (0,) * (self.domain_size - k)

    def points(self, keys: Sequence[Point]) -> List[Point]:
        """The px/py column as points, one per row."""
        k = self.keyset_part_size
        if len(keys) > k:
            raise InvalidData(f"ring of {len(keys)} keys exceeds capacity {k}")
        identity = self.suite.curve.identity()
        out = list(keys) + [self.padding_point] * (k - len(keys))
        out += self.h_powers
        out += [identity] * (self.domain_size - len(out))
        return out


# ── ring commitment / keys ──────────────────────────────────────────────
@dataclass(frozen=True)
class RingCommitment:
    """KZG commitments to the fixed columns px, py and sel."""

    suite: object
    cx: G1Point
    cy: G1Point
    selector: G1Point

    def points(self) -> Tuple[G1Point, G1Point, G1Point]:
        return (self.cx, self.cy, self.selector)

    def to_bytes(self) -> bytes:
        g = self.suite.PAIRING
        return b"".join(g.g1_encode(pt) for pt in self.points())

    @classmethod
    def from_bytes(cls, suite, data: bytes) -> RingCommitment:
        g = suite.PAIRING
        n = g.G1_ENCODED_LEN
        if len(data) != 3 * n:
            raise InvalidData(f"need {3 * n} ring commitment bytes, got {len(data)}")
        return cls(suite, *(g.g1_decode(data[i * n:(i + 1) * n]) for i in range(3)))


@dataclass(frozen=True)
class RingVerifierKey:
    """Ring commitment plus the verifier part of the setup."""

    commitment: RingCommitment
    vk: KzgVerifierKey

    @classmethod
    def from_commitment(cls, commitment: RingCommitment, vk: KzgVerifierKey) -> RingVerifierKey:
        return cls(commitment, vk)


@dataclass(frozen=True)
class RingProverKey:
    """Ring keys, the setup and the fixed columns in coefficient form."""

    keys: Tuple[Point, ...]
    pcs: PcsParams
    fixed: Tuple[Tuple[int, ...], ...]
    verifier_key: RingVerifierKey

    @property
    def commitment(self) -> RingCommitment:
        return self.verifier_key.commitment


def index(
    pcs: PcsParams,
    piop: PiopParams,
    keys: Sequence[Point],
) -> Tuple[RingProverKey, RingVerifierKey]:
    """Interpolate and commit the fixed columns for *keys*."""
    pts = piop.points(keys)
    logger.debug("indexing ring of %d keys (%s)", len(keys), pcs.suite.NAME)
    domain = piop.domain
    fixed = tuple(
        tuple(domain.ifft(col))
        for col in ([pt.x for pt in pts], [pt.y for pt in pts], piop.selector)
    )
    commitment = RingCommitment(pcs.suite, *(pcs.urs.commit(c) for c in fixed))
    vk = RingVerifierKey(commitment, pcs.raw_vk())
    return RingProverKey(tuple(keys), pcs, fixed, vk), vk


def commit(pcs: PcsParams, piop: PiopParams, keys: Sequence[Point]) -> RingCommitment:
    return index(pcs, piop, keys)[1].commitment


def accumulate(
    commitment: RingCommitment,
    piop: PiopParams,
    keys: Sequence[Point],
    lagrangian: Sequence[G1Point],
) -> RingCommitment:
    """
    Put *keys* into the padding rows that *lagrangian* ([L_i(τ)]₁ for
    those rows) covers:  C_x += Σ (x_i − pad_x)·[L_i],  same for y.
    """
    suite = commitment.suite
    g = suite.PAIRING
    p = piop.field.modulus
    pad = piop.padding_point
    dx = g.msm(lagrangian, [(pk.x - pad.x) % p for pk in keys])
    dy = g.msm(lagrangian, [(pk.y - pad.y) % p for pk in keys])
    return RingCommitment(
        suite,
        g.normalize(g.add(commitment.cx, dx)),
        g.normalize(g.add(commitment.cy, dy)),
        commitment.selector,
    )


# ── transcript ──────────────────────────────────────────────────────────
class Transcript:
    """
    Fiat-Shamir transcript on the suite hash.

    Every message is absorbed as  label ‖ le32(len) ‖ data; a challenge is
    Hash(suite_id ‖ 0x22 ‖ state ‖ label ‖ 0x00) reduced into the field,
    and the digest is absorbed back so later challenges depend on it.
    """

    def __init__(self, suite, label: bytes) -> None:
        self.suite = suite
        self._state = bytearray()
        self.append(b"dom-sep", label)

    def append(self, label: bytes, data: bytes) -> None:
        self._state += label + _u32(len(data)) + data

    def append_point(self, label: bytes, pt: G1Point) -> None:
        self.append(label, self.suite.PAIRING.g1_encode(pt))

    def append_scalars(self, label: bytes, values: Sequence[int]) -> None:
        field = self.suite.curve.base_field
        self.append(label, b"".join(field.to_le_bytes(v) for v in values))

    def challenge(self, label: bytes) -> int:
        digest = tagged_hash(self.suite, TAG_RING_CHALLENGE, bytes(self._state), label)
        self.append(label, digest)
        return self.suite.curve.base_field.from_le_bytes_mod_order(digest)


def _transcript(piop: PiopParams, commitment: RingCommitment, key_commitment: Point) -> Transcript:
    suite = piop.suite
    t = Transcript(suite, b"ring-membership")
    t.append(b"domain", _u32(piop.domain_size))
    t.append(b"ring", commitment.to_bytes())
    t.append(b"key", suite.point_encode(key_commitment))
    return t


def _constraint(
    p: int,
    a: int,
    alphas: Sequence[int],
    seed: Tuple[int, int],
    result: Tuple[int, int],
    px: int, py: int, sel: int, b: int, ax: int, ay: int, ip: int,
    ax1: int, ay1: int, ip1: int,
    not_last: int, l_first: int, l_last: int,
) -> int:
    """Σ α^i·c_i at one point, given every column value there."""
    nb = 1 - b
    cs = (
        b * nb,
        (ip1 - ip - sel * b) * not_last,
        (b * (ax1 * (ay * py + a * ax * px) - (ax * ay + px * py)) + nb * (ax1 - ax)) * not_last,
        (b * (ay1 * (ax * py - ay * px) - (ax * ay - px * py)) + nb * (ay1 - ay)) * not_last,
        l_first * (ax - seed[0]),
        l_first * (ay - seed[1]),
        l_first * ip,
        l_last * (ax - result[0]),
        l_last * (ay - result[1]),
        l_last * (ip - 1),
    )
    return sum(w * c for w, c in zip(alphas, cs)) % p


def _zk_rows_product(piop: PiopParams, x: int) -> int:
    """Π (x − ω^i) over the rows where constraints are not enforced."""
    p = piop.field.modulus
    out = 1
    for i in range(piop.capacity, piop.domain_size):
        out = out * (x - piop.domain.element(i)) % p
    return out


# ── membership proof ────────────────────────────────────────────────────
@dataclass(frozen=True)
class MembershipProof:
    """
    Fixed-size membership proof.

    Wire format (compressed G1 points, little-endian field elements, no
    length fields):

        [b] ‖ [acc_x] ‖ [acc_y] ‖ [ip] ‖ [q]
        ‖ px, py, sel, b, acc_x, acc_y, ip, q  at ζ
        ‖ acc_x, acc_y, ip  at ζ·ω
        ‖ W_ζ ‖ W_ζω
    """

    suite: object
    column_commitments: Tuple[G1Point, ...]
    quotient_commitment: G1Point
    zeta_evals: Tuple[int, ...]
    zeta_omega_evals: Tuple[int, ...]
    zeta_opening: G1Point
    zeta_omega_opening: G1Point

    N_ZETA_EVALS = 8
    N_ZETA_OMEGA_EVALS = 3

    @staticmethod
    def encoded_len(suite) -> int:
        scalars = MembershipProof.N_ZETA_EVALS + MembershipProof.N_ZETA_OMEGA_EVALS
        return 7 * suite.PAIRING.G1_ENCODED_LEN + scalars * suite.curve.base_field.byte_len

    def to_bytes(self) -> bytes:
        g = self.suite.PAIRING
        field = self.suite.curve.base_field
        points = (*self.column_commitments, self.quotient_commitment)
        return b"".join([
            *(g.g1_encode(pt) for pt in points),
            *(field.to_le_bytes(v) for v in self.zeta_evals + self.zeta_omega_evals),
            g.g1_encode(self.zeta_opening),
            g.g1_encode(self.zeta_omega_opening),
        ])

    @classmethod
    def from_bytes(cls, suite, data: bytes) -> MembershipProof:
        n = cls.encoded_len(suite)
        if len(data) != n:
            raise InvalidData(f"need {n} membership proof bytes, got {len(data)}")
        g = suite.PAIRING
        field = suite.curve.base_field
        plen, slen = g.G1_ENCODED_LEN, field.byte_len
        off = 0

        def point() -> G1Point:
            nonlocal off
            pt = g.g1_decode(data[off:off + plen])
            off += plen
            return pt

        def scalar() -> int:
            nonlocal off
            v = int.from_bytes(data[off:off + slen], "little")
            if v >= field.modulus:
                raise InvalidData("non-canonical field element")
            off += slen
            return v

        columns = tuple(point() for _ in _WITNESS_LABELS)
        quotient = point()
        zeta_evals = tuple(scalar() for _ in range(cls.N_ZETA_EVALS))
        zeta_omega_evals = tuple(scalar() for _ in range(cls.N_ZETA_OMEGA_EVALS))
        return cls(suite, columns, quotient, zeta_evals, zeta_omega_evals, point(), point())


class RingProver:
    """Prover for the member at ``key_index`` of a ring."""

    def __init__(self, prover_key: RingProverKey, piop: PiopParams, key_index: int) -> None:
        if not 0 <= key_index < len(prover_key.keys):
            raise IndexError(f"key index {key_index} outside ring of {len(prover_key.keys)}")
        self.prover_key = prover_key
        self.piop = piop
        self.key_index = key_index

    def prove(self, blinding: int) -> MembershipProof:
        """
        Prove that  P_j + blinding·H  commits to ring member *j*.

        The random rows are drawn from a stream keyed by the blinding
        factor, the ring commitment and the position, so proving is
        deterministic.
        """
        piop = self.piop
        suite = piop.suite
        field = piop.field
        p = field.modulus
        n = piop.domain_size
        pk = self.prover_key
        j = self.key_index
        blinding %= suite.order

        key_commitment = pk.keys[j] + suite.curve.mul(piop.blinding_base, blinding)
        rng = ChaCha20Rng(tagged_hash(
            suite, TAG_RING_NONCE, suite.scalar_encode(blinding),
            pk.commitment.to_bytes(), _u32(j),
        )[:SEED_LEN])

        # witness columns
        pts = piop.points(pk.keys)
        sel = piop.selector
        b = [0] * n
        b[j] = 1
        k = piop.keyset_part_size
        for i in range(piop.scalar_bits):
            b[k + i] = (blinding >> i) & 1
        acc = piop.accumulator_base
        ax, ay, ip = [0] * n, [0] * n, [0] * n
        ax[0], ay[0] = acc.x, acc.y
        for i in range(piop.last_row):
            if b[i]:
                acc = acc + pts[i]
            ax[i + 1], ay[i + 1] = acc.x, acc.y
            ip[i + 1] = ip[i] + sel[i] * b[i]
        for i in range(piop.capacity, n):
            b[i], ax[i], ay[i], ip[i] = (field.random(rng) for _ in range(4))

        domain = piop.domain
        witness = [domain.ifft(col) for col in (b, ax, ay, ip)]
        urs = pk.pcs.urs
        columns = tuple(urs.commit(c) for c in witness)

        t = _transcript(piop, pk.commitment, key_commitment)
        for label, c in zip(_WITNESS_LABELS, columns):
            t.append_point(label, c)
        alpha = t.challenge(b"alpha")

        fixed = [list(c) for c in pk.fixed]
        quotient = self._quotient(fixed, witness, alpha, (acc.x, acc.y))
        quotient_commitment = urs.commit(quotient)
        t.append_point(b"quotient", quotient_commitment)
        zeta = t.challenge(b"zeta")

        zeta_omega = zeta * domain.omega % p
        at_zeta = fixed + witness + [quotient]
        at_zeta_omega = witness[1:]
        zeta_evals = tuple(poly_eval(f, zeta, p) for f in at_zeta)
        zeta_omega_evals = tuple(poly_eval(f, zeta_omega, p) for f in at_zeta_omega)
        t.append_scalars(b"evals", zeta_evals + zeta_omega_evals)
        nu = t.challenge(b"nu")

        w_zeta = urs.open(poly_combine(at_zeta, _powers(nu, len(at_zeta), p), p), zeta)
        w_zeta_omega = urs.open(
            poly_combine(at_zeta_omega, _powers(nu, len(at_zeta_omega), p), p), zeta_omega,
        )
        return MembershipProof(suite, columns, quotient_commitment, zeta_evals,
                               zeta_omega_evals, w_zeta, w_zeta_omega)

    def _quotient(
        self,
        fixed: List[Poly],
        witness: List[Poly],
        alpha: int,
        result: Tuple[int, int],
    ) -> Poly:
        """Σ α^i·c_i divided by the vanishing polynomial of the enforced rows."""
        piop = self.piop
        field = piop.field
        p = field.modulus
        n = piop.domain_size
        big = piop.quotient_domain
        size = big.size
        shift = size // n  # ω·x_k = x_(k+shift) on the coset

        px, py, sel, b, ax, ay, ip = (big.coset_fft(f) for f in fixed + witness)
        unit_first = [0] * n
        unit_first[0] = 1
        unit_last = [0] * n
        unit_last[piop.last_row] = 1
        l_first = big.coset_fft(piop.domain.ifft(unit_first))
        l_last = big.coset_fft(piop.domain.ifft(unit_last))

        xs = big.coset_elements()
        zh_inv = field.batch_inverse([(pow(x, n, p) - 1) % p for x in xs])
        w_last = piop.domain.element(piop.last_row)
        alphas = _powers(alpha, _N_CONSTRAINTS, p)
        seed = (piop.accumulator_base.x, piop.accumulator_base.y)
        a = self.piop.suite.curve.a

        out = [0] * size
        for k in range(size):
            k1 = (k + shift) % size
            x = xs[k]
            c = _constraint(
                p, a, alphas, seed, result,
                px[k], py[k], sel[k], b[k], ax[k], ay[k], ip[k],
                ax[k1], ay[k1], ip[k1],
                (x - w_last) % p, l_first[k], l_last[k],
            )
            out[k] = c * _zk_rows_product(piop, x) % p * zh_inv[k] % p
        return big.coset_ifft(out)[:3 * n + 1]


# ── verification ────────────────────────────────────────────────────────
Claim = Tuple[Tuple[Tuple[G1Point, int], ...], int, int, G1Point]


@dataclass(frozen=True)
class PreparedMembership:
    """A membership proof after its transcript and constraint checks."""

    proof: MembershipProof
    key_commitment: Point
    claims: Tuple[Claim, ...]
    constraints_ok: bool


class MembershipBatchVerifier:
    """
    Accumulates (proof, key commitment) pairs checked against one
    verifier key with a single pairing product.
    """

    def __init__(self, verifier_key: RingVerifierKey, piop: PiopParams) -> None:
        self.verifier_key = verifier_key
        self.piop = piop
        self.items: List[PreparedMembership] = []

    def prepare(self, proof: MembershipProof, key_commitment: Point) -> PreparedMembership:
        piop = self.piop
        suite = piop.suite
        p = piop.field.modulus
        commitment = self.verifier_key.commitment

        t = _transcript(piop, commitment, key_commitment)
        for label, c in zip(_WITNESS_LABELS, proof.column_commitments):
            t.append_point(label, c)
        alpha = t.challenge(b"alpha")
        t.append_point(b"quotient", proof.quotient_commitment)
        zeta = t.challenge(b"zeta")
        t.append_scalars(b"evals", proof.zeta_evals + proof.zeta_omega_evals)
        nu = t.challenge(b"nu")

        domain = piop.domain
        seed = piop.accumulator_base
        result = seed + key_commitment
        px, py, sel, b, ax, ay, ip, q = proof.zeta_evals
        ax1, ay1, ip1 = proof.zeta_omega_evals
        vanishing = domain.vanishing_eval(zeta) * piop.field.inv(_zk_rows_product(piop, zeta)) % p
        c = _constraint(
            p, suite.curve.a, _powers(alpha, _N_CONSTRAINTS, p),
            (seed.x, seed.y), (result.x, result.y),
            px, py, sel, b, ax, ay, ip, ax1, ay1, ip1,
            (zeta - domain.element(piop.last_row)) % p,
            domain.lagrange_eval(0, zeta), domain.lagrange_eval(piop.last_row, zeta),
        )
        ok = c == q * vanishing % p

        at_zeta = commitment.points() + proof.column_commitments + (proof.quotient_commitment,)
        at_zeta_omega = proof.column_commitments[1:]
        claims = []
        for coms, evals, z, w in (
            (at_zeta, proof.zeta_evals, zeta, proof.zeta_opening),
            (at_zeta_omega, proof.zeta_omega_evals, zeta * domain.omega % p,
             proof.zeta_omega_opening),
        ):
            nus = _powers(nu, len(coms), p)
            value = sum(k * v for k, v in zip(nus, evals)) % p
            claims.append((tuple(zip(coms, nus)), value, z, w))
        return PreparedMembership(proof, key_commitment, tuple(claims), ok)

    def push_prepared(self, item: PreparedMembership) -> None:
        self.items.append(item)

    def push(self, proof: MembershipProof, key_commitment: Point) -> None:
        self.push_prepared(self.prepare(proof, key_commitment))

    def __len__(self) -> int:
        return len(self.items)

    def verify(self) -> bool:
        items = self.items
        if not items:
            return True
        if not all(it.constraints_ok for it in items):
            return False
        suite = self.piop.suite
        seed = tagged_hash(suite, TAG_BATCH_WEIGHTS, *(
            suite.point_encode(it.key_commitment) + it.proof.to_bytes() for it in items
        ))
        rng = ChaCha20Rng(seed[:SEED_LEN])
        acc = OpeningAccumulator(self.verifier_key.vk)
        for it in items:
            for terms, value, z, w in it.claims:
                acc.add_claim(terms, value, z, w, rng.weight())
        logger.debug("ring membership batch: %d proofs (%s)", len(items), suite.NAME)
        return acc.verify()


class RingVerifier:
    """Checks membership proofs against a ``RingVerifierKey``."""

    def __init__(self, verifier_key: RingVerifierKey, piop: PiopParams) -> None:
        self.verifier_key = verifier_key
        self.piop = piop

    def verify(self, proof: MembershipProof, key_commitment: Point) -> bool:
        batch = self.batch_verifier()
        batch.push(proof, key_commitment)
        return batch.verify()

    def batch_verifier(self) -> MembershipBatchVerifier:
        return MembershipBatchVerifier(self.verifier_key, self.piop)
