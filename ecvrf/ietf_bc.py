"""
Batch-compatible IETF VRF proof.

Same relation as ``ietf.IetfProof`` but the proof carries the nonce
commitments instead of the challenge:

    U = k·G,   V = k·H,   s = k + c·x,   c = challenge(Y, H, Γ, U, V, ad)

Single verification checks

    U + c·Y == s·G      and      V + c·Γ == s·H

Because both equations are linear in the proof's points, *n* proofs can
be folded into one (5n + 1)-term MSM with random weights (l_i, r_i):

    Σ_i [ −r_i c_i·Y_i − r_i·U_i + l_i s_i·H_i − l_i c_i·Γ_i − l_i·V_i ]
        + (Σ_i r_i s_i)·G   ==  O

The weights are hashed from the transcript of every (H_i, U_i, V_i, s_i),
so they are fixed only once all proofs are.

Wire format:  U ‖ V ‖ s.

References
----------
- Bellare, Garay, Rabin (1998). "Fast Batch Verification for Modular
  Exponentiation and Digital Signatures."  EUROCRYPT 1998.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from .curve import Point
from .errors import InvalidData, VerificationFailure
from .hash import TAG_BATCH_WEIGHTS, tagged_hash
from .keys import Input, Output, Public, Secret, check_suite
from .suite import Suite

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IetfBcProof:
    """Transcript (U, V, s)."""

    suite: Suite
    u: Point
    v: Point
    s: int

    @staticmethod
    def prove(
        secret: Secret,
        input: Input,
        output: Output,
        ad: bytes = b"",
    ) -> IetfBcProof:
        suite = secret.suite
        check_suite(suite, input, output)
        curve = suite.curve
        x = secret.scalar
        k = suite.nonce(x, input.point)
        u = curve.mul(suite.generator(), k)
        v = curve.mul(input.point, k)
        c = suite.challenge(
            [secret.public().point, input.point, output.point, u, v], ad,
        )
        return IetfBcProof(suite, u, v, (k + c * x) % suite.order)

    def verify(
        self,
        public: Public,
        input: Input,
        output: Output,
        ad: bytes = b"",
    ) -> None:
        """
        Raise ``VerificationFailure`` unless

            U + c·Y == s·G   and   V + c·Γ == s·H.
        """
        suite = self.suite
        check_suite(suite, public, input, output)
        curve = suite.curve
        c = suite.challenge(
            [public.point, input.point, output.point, self.u, self.v], ad,
        )
        lhs1 = curve.msm([suite.generator(), public.point], [self.s, -c])
        if lhs1 != self.u:
            raise VerificationFailure()
        lhs2 = curve.msm([input.point, output.point], [self.s, -c])
        if lhs2 != self.v:
            raise VerificationFailure()

    def to_bytes(self) -> bytes:
        suite = self.suite
        return (suite.point_encode(self.u) + suite.point_encode(self.v)
                + suite.scalar_encode(self.s))

    @classmethod
    def from_bytes(cls, suite: Suite, data: bytes) -> IetfBcProof:
        plen, slen = suite.POINT_ENCODED_LEN, suite.SCALAR_ENCODED_LEN
        if len(data) != 2 * plen + slen:
            raise InvalidData(
                f"need {2 * plen + slen} proof bytes, got {len(data)}"
            )
        u = suite.point_decode(data[:plen], checked=True)
        v = suite.point_decode(data[plen:2 * plen], checked=True)
        s = suite.scalar_decode(data[2 * plen:], checked=True)
        return cls(suite, u, v, s)


# ── batch verification ──────────────────────────────────────────────────
@dataclass(frozen=True)
class IetfBcBatchItem:
    """One proof with its challenge already computed."""

    c: int
    pk: Point
    input: Point
    output: Point
    u: Point
    v: Point
    s: int


class IetfBcBatchVerifier:
    """
    Accumulates proofs and checks them all with one MSM.

    ``prepare`` only hashes and touches no shared state, so it can run
    in worker threads; ``push_prepared`` and ``verify`` belong to the
    owning thread.  ``verify`` leaves the accumulator untouched.
    """

    def __init__(self, suite: Suite) -> None:
        self.suite = suite
        self.items: List[IetfBcBatchItem] = []

    @staticmethod
    def prepare(
        public: Public,
        input: Input,
        output: Output,
        ad: bytes,
        proof: IetfBcProof,
    ) -> IetfBcBatchItem:
        suite = proof.suite
        check_suite(suite, public, input, output)
        c = suite.challenge(
            [public.point, input.point, output.point, proof.u, proof.v], ad,
        )
        return IetfBcBatchItem(
            c, public.point, input.point, output.point, proof.u, proof.v, proof.s,
        )

    def push_prepared(self, item: IetfBcBatchItem) -> None:
        self.suite.check(item.pk)
        self.items.append(item)

    def push(
        self,
        public: Public,
        input: Input,
        output: Output,
        ad: bytes,
        proof: IetfBcProof,
    ) -> None:
        self.push_prepared(self.prepare(public, input, output, ad, proof))

    def __len__(self) -> int:
        return len(self.items)

    def verify(self) -> None:
        """
        Raise ``VerificationFailure`` unless every pushed proof is valid.

        An empty batch verifies.
        """
        items = self.items
        if not items:
            return
        suite = self.suite
        codec = suite.codec
        clen = suite.CHALLENGE_LEN
        order = suite.order

        transcript = b"".join(
            codec.point_encode(e.input) + codec.point_encode(e.u)
            + codec.point_encode(e.v) + codec.scalar_encode(e.s)
            for e in items
        )

        bases: List[Point] = []
        scalars: List[int] = []
        g_scalar = 0
        for i, e in enumerate(items):
            h = tagged_hash(suite, TAG_BATCH_WEIGHTS, transcript,
                            i.to_bytes(4, "little"))
            if len(h) < 2 * clen:
                raise ValueError("hash too short for batch weight derivation")
            l_i = int.from_bytes(h[:clen], "little") % order
            r_i = int.from_bytes(h[clen:2 * clen], "little") % order

            bases += [e.pk, e.u, e.input, e.output, e.v]
            scalars += [-r_i * e.c, -r_i, l_i * e.s, -l_i * e.c, -l_i]
            g_scalar += r_i * e.s

        bases.append(suite.generator())
        scalars.append(g_scalar)

        logger.debug("ietf_bc batch: %d proofs, %d-term MSM (%s)",
                     len(items), len(bases), suite.NAME)
        if not suite.curve.msm(bases, scalars).is_identity():
            raise VerificationFailure()
