"""
Thin VRF: one Schnorr-style equation for both the key and the output.

An IETF proof shows two discrete-log equalities, (G, Y) and (H, Γ).
Thin VRF merges them with short delinearization weights

    (z0, z1) = split(Hash(suite_id ‖ 0x11 ‖ G ‖ Y ‖ H ‖ Γ ‖ 0x00))
    I_m = z0·H + z1·G,       O_m = z0·Γ + z1·Y  ( = x·I_m )

and proves only  O_m = x·I_m :

    R = k·I_m,   c = Hash(suite_id ‖ 0x12 ‖ Y ‖ H ‖ Γ ‖ R ‖ ad ‖ 0x00),
    s = k + c·x

Verification:  R + c·O_m == s·I_m.  Batches fold into a 3n-term MSM
with random 128-bit weights.

Wire format:  R ‖ s.

References
----------
- Burdges, Ciobotaru, Alper, Stewart, Vasilyev (2023). "Ring Verifiable
  Random Functions and Zero-Knowledge Continuations."  ePrint 2023/002,
  §3 (thin VRF).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from .curve import Point
from .errors import InvalidData, VerificationFailure
from .hash import TAG_THIN_CHALLENGE, TAG_THIN_DELINEARIZE, ChaCha20Rng, tagged_hash
from .keys import Input, Output, Public, Secret, check_suite
from .suite import Suite

logger = logging.getLogger(__name__)


def _delinearize(suite: Suite, pk: Point, input: Point, output: Point) -> Tuple[int, int]:
    enc = suite.point_encode
    digest = tagged_hash(
        suite, TAG_THIN_DELINEARIZE,
        enc(suite.generator()), enc(pk), enc(input), enc(output),
    )
    field = suite.scalar_field
    return (field.from_le_bytes_mod_order(digest[:16]),
            field.from_le_bytes_mod_order(digest[16:32]))


def _challenge(
    suite: Suite, pk: Point, input: Point, output: Point, r: Point, ad: bytes,
) -> int:
    enc = suite.point_encode
    digest = tagged_hash(
        suite, TAG_THIN_CHALLENGE, enc(pk), enc(input), enc(output), enc(r), ad,
    )
    return suite.scalar_field.from_be_bytes_mod_order(digest[:suite.CHALLENGE_LEN])


def _merged(suite: Suite, pk: Point, input: Point, output: Point) -> Tuple[Point, Point]:
    z0, z1 = _delinearize(suite, pk, input, output)
    i_m, o_m = suite.curve.msm_many([
        ([input, suite.generator()], [z0, z1]),
        ([output, pk], [z0, z1]),
    ])
    return i_m, o_m


@dataclass(frozen=True)
class ThinProof:
    """Transcript (R, s)."""

    suite: Suite
    r: Point
    s: int

    @staticmethod
    def prove(
        secret: Secret,
        input: Input,
        output: Output,
        ad: bytes = b"",
    ) -> ThinProof:
        suite = secret.suite
        check_suite(suite, input, output)
        pk = secret.public().point
        x = secret.scalar
        z0, z1 = _delinearize(suite, pk, input.point, output.point)
        i_m = suite.curve.msm([input.point, suite.generator()], [z0, z1])
        k = suite.nonce(x, i_m)
        r = suite.curve.mul(i_m, k)
        c = _challenge(suite, pk, input.point, output.point, r, ad)
        return ThinProof(suite, r, (k + c * x) % suite.order)

    def verify(
        self,
        public: Public,
        input: Input,
        output: Output,
        ad: bytes = b"",
    ) -> None:
        """Raise ``VerificationFailure`` unless  R + c·O_m == s·I_m."""
        suite = self.suite
        check_suite(suite, public, input, output)
        i_m, o_m = _merged(suite, public.point, input.point, output.point)
        c = _challenge(suite, public.point, input.point, output.point, self.r, ad)
        if suite.curve.msm([i_m, o_m], [self.s, -c]) != self.r:
            raise VerificationFailure()

    def to_bytes(self) -> bytes:
        return self.suite.point_encode(self.r) + self.suite.scalar_encode(self.s)

    @classmethod
    def from_bytes(cls, suite: Suite, data: bytes) -> ThinProof:
        plen, slen = suite.POINT_ENCODED_LEN, suite.SCALAR_ENCODED_LEN
        if len(data) != plen + slen:
            raise InvalidData(f"need {plen + slen} proof bytes, got {len(data)}")
        r = suite.point_decode(data[:plen], checked=True)
        return cls(suite, r, suite.scalar_decode(data[plen:], checked=True))


# ── batch verification ──────────────────────────────────────────────────
@dataclass(frozen=True)
class ThinBatchItem:
    c: int
    i_m: Point
    o_m: Point
    r: Point
    s: int


class ThinBatchVerifier:
    """Accumulates Thin VRF proofs and checks them with one 3n-term MSM."""

    def __init__(self, suite: Suite) -> None:
        self.suite = suite
        self.items: List[ThinBatchItem] = []

    @staticmethod
    def prepare(
        public: Public,
        input: Input,
        output: Output,
        ad: bytes,
        proof: ThinProof,
    ) -> ThinBatchItem:
        suite = proof.suite
        check_suite(suite, public, input, output)
        i_m, o_m = _merged(suite, public.point, input.point, output.point)
        c = _challenge(suite, public.point, input.point, output.point, proof.r, ad)
        return ThinBatchItem(c, i_m, o_m, proof.r, proof.s)

    def push_prepared(self, item: ThinBatchItem) -> None:
        self.suite.check(item.r)
        self.items.append(item)

    def push(
        self,
        public: Public,
        input: Input,
        output: Output,
        ad: bytes,
        proof: ThinProof,
    ) -> None:
        self.push_prepared(self.prepare(public, input, output, ad, proof))

    def __len__(self) -> int:
        return len(self.items)

    def verify(self) -> None:
        """
        Raise ``VerificationFailure`` unless

            Σ_i  w_i·R_i + (w_i c_i)·O_m,i − (w_i s_i)·I_m,i  ==  O

        with 128-bit weights w_i drawn from a ChaCha20 stream seeded by every (c_i, s_i).
        """
        items = self.items
        if not items:
            return
        suite = self.suite
        enc = suite.scalar_encode
        seed = suite.hash(b"".join(enc(e.c) + enc(e.s) for e in items))
        rng = ChaCha20Rng(seed[:32])

        bases: List[Point] = []
        scalars: List[int] = []
        for e in items:
            w = rng.weight()
            bases += [e.r, e.o_m, e.i_m]
            scalars += [w, w * e.c, -w * e.s]

        logger.debug("thin batch: %d proofs, %d-term MSM (%s)",
                     len(items), len(bases), suite.NAME)
        if not suite.curve.msm(bases, scalars).is_identity():
            raise VerificationFailure()
