"""
Pedersen VRF: a VRF proof against a *commitment* to the public key.

The prover blinds its key with a second, independent base B:

    Y_b = x·G + b·B           (key commitment, perfectly hiding)

and proves in zero knowledge that the secret committed in Y_b is the
discrete log of Γ relative to H:

    R   = k·G + k_b·B,   O_k = k·H
    c   = challenge(Y_b, H, Γ, R, O_k, ad)
    s   = k + c·x,       s_b = k_b + c·b

Verification needs no public key:

    O_k + c·Γ == s·H      and      R + c·Y_b == s·G + s_b·B

The holder of *b* can open Y_b to a specific Y  (Y_b − b·B == Y); anyone
else learns nothing about Y.  This is the key-hiding half of the ring VRF.

B is derived from a fixed seed with ``suite.data_to_point`` (a
nothing-up-my-sleeve point), so log_G(B) is unknown.

Wire format:  Y_b ‖ R ‖ O_k ‖ s ‖ s_b.

References
----------
- Pedersen (1991). "Non-Interactive and Information-Theoretic Secure
  Verifiable Secret Sharing."  CRYPTO 1991.
- Burdges, Ciobotaru, Alper, Stewart, Vasilyev (2023). "Ring Verifiable
  Random Functions and Zero-Knowledge Continuations."  ePrint 2023/002.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from typing import List, Tuple

from .curve import Point
from .errors import InvalidData, VerificationFailure
from .hash import TAG_PEDERSEN_BLIND, ChaCha20Rng, tagged_hash
from .keys import Input, Output, Secret, check_suite
from .suite import Suite

logger = logging.getLogger(__name__)

PEDERSEN_BASE_SEED = (
    b"basis caecans lucis occultae quae mentem fugit et tenebras iis qui vident creat"
)


class PedersenSuite(Suite):
    """Suite with a blinding base for key commitments."""

    @cached_property
    def BLINDING_BASE(self) -> Point:
        pt = self.data_to_point(PEDERSEN_BASE_SEED)
        if pt is None:
            raise ValueError(f"{self.NAME}: cannot derive the blinding base")
        return pt

    def blinding(self, sk: int, input_point: Point, ad: bytes) -> int:
        """
        Deterministic blinding factor

            b = Hash(suite_id ‖ 0xCC ‖ sk ‖ H ‖ ad ‖ 0x00)  (big endian, mod q)

        Hashes the secret scalar itself; the result never leaves the prover
        except through ``PedersenProof.prove``'s return value.
        """
        digest = tagged_hash(
            self, TAG_PEDERSEN_BLIND,
            self.scalar_encode(sk), self.point_encode(input_point), ad,
        )
        return self.scalar_field.from_be_bytes_mod_order(digest)


@dataclass(frozen=True)
class PedersenProof:
    """Transcript (Y_b, R, O_k, s, s_b)."""

    suite: PedersenSuite
    pk_com: Point
    r: Point
    ok: Point
    s: int
    sb: int

    @staticmethod
    def prove(
        secret: Secret,
        input: Input,
        output: Output,
        ad: bytes = b"",
    ) -> Tuple[PedersenProof, int]:
        """
        Prove  output = secret·input  against a fresh key commitment.

        Returns
        -------
        (PedersenProof, int)
            The proof and the blinding factor *b* used for ``pk_com``.
        """
        suite = secret.suite
        check_suite(suite, input, output)
        curve = suite.curve
        g, bb = suite.generator(), suite.BLINDING_BASE
        x = secret.scalar

        b = suite.blinding(x, input.point, ad)
        k = suite.nonce(x, input.point)
        kb = suite.nonce(b, input.point)

        pk_com = curve.msm([g, bb], [x, b])
        r = curve.msm([g, bb], [k, kb])
        ok = curve.mul(input.point, k)

        c = suite.challenge([pk_com, input.point, output.point, r, ok], ad)
        n = suite.order
        proof = PedersenProof(suite, pk_com, r, ok, (k + c * x) % n, (kb + c * b) % n)
        return proof, b

    def verify(self, input: Input, output: Output, ad: bytes = b"") -> None:
        """
        Raise ``VerificationFailure`` unless

            O_k + c·Γ == s·H   and   R + c·Y_b == s·G + s_b·B.
        """
        suite = self.suite
        check_suite(suite, input, output)
        curve = suite.curve
        c = suite.challenge(
            [self.pk_com, input.point, output.point, self.r, self.ok], ad,
        )
        if curve.msm([input.point, output.point], [self.s, -c]) != self.ok:
            raise VerificationFailure()
        lhs = curve.msm(
            [suite.generator(), suite.BLINDING_BASE, self.pk_com],
            [self.s, self.sb, -c],
        )
        if lhs != self.r:
            raise VerificationFailure()

    def key_commitment(self) -> Point:
        """Y_b = x·G + b·B."""
        return self.pk_com

    # serialization ----------------------------------------------------------
    def to_bytes(self) -> bytes:
        suite = self.suite
        return b"".join([
            suite.point_encode(self.pk_com),
            suite.point_encode(self.r),
            suite.point_encode(self.ok),
            suite.scalar_encode(self.s),
            suite.scalar_encode(self.sb),
        ])

    @classmethod
    def encoded_len(cls, suite: Suite) -> int:
        return 3 * suite.POINT_ENCODED_LEN + 2 * suite.SCALAR_ENCODED_LEN

    @classmethod
    def from_bytes(cls, suite: PedersenSuite, data: bytes) -> PedersenProof:
        plen, slen = suite.POINT_ENCODED_LEN, suite.SCALAR_ENCODED_LEN
        if len(data) != cls.encoded_len(suite):
            raise InvalidData(
                f"need {cls.encoded_len(suite)} proof bytes, got {len(data)}"
            )
        pts = [suite.point_decode(data[i * plen:(i + 1) * plen], checked=True)
               for i in range(3)]
        off = 3 * plen
        s = suite.scalar_decode(data[off:off + slen], checked=True)
        sb = suite.scalar_decode(data[off + slen:], checked=True)
        return cls(suite, pts[0], pts[1], pts[2], s, sb)


# ── batch verification ──────────────────────────────────────────────────
@dataclass(frozen=True)
class PedersenBatchItem:
    c: int
    input: Point
    output: Point
    pk_com: Point
    r: Point
    ok: Point
    s: int
    sb: int


class PedersenBatchVerifier:
    """
    Folds many Pedersen proofs into one (5n + 2)-term MSM.

    Each item contributes both verification equations, scaled by two
    independent 128-bit weights (w1, w2):

        w1·O_k + w1 c·Γ − w1 s·H + w2·R + w2 c·Y_b
            − (Σ w2 s)·G − (Σ w2 s_b)·B  ==  O

    The weights come from a ChaCha20 stream seeded with every (c, s, s_b), so they
    are fixed only after all proofs are.
    """

    def __init__(self, suite: PedersenSuite) -> None:
        self.suite = suite
        self.items: List[PedersenBatchItem] = []

    @staticmethod
    def prepare(
        input: Input,
        output: Output,
        ad: bytes,
        proof: PedersenProof,
    ) -> PedersenBatchItem:
        suite = proof.suite
        check_suite(suite, input, output)
        c = suite.challenge(
            [proof.pk_com, input.point, output.point, proof.r, proof.ok], ad,
        )
        return PedersenBatchItem(
            c, input.point, output.point, proof.pk_com, proof.r, proof.ok,
            proof.s, proof.sb,
        )

    def push_prepared(self, item: PedersenBatchItem) -> None:
        self.suite.check(item.pk_com)
        self.items.append(item)

    def push(
        self,
        input: Input,
        output: Output,
        ad: bytes,
        proof: PedersenProof,
    ) -> None:
        self.push_prepared(self.prepare(input, output, ad, proof))

    def __len__(self) -> int:
        return len(self.items)

    def msm_terms(self) -> Tuple[List[Point], List[int]]:
        """Bases and scalars of the combined check (empty for an empty batch)."""
        suite = self.suite
        items = self.items
        if not items:
            return [], []
        enc = suite.scalar_encode
        seed = suite.hash(b"".join(enc(e.c) + enc(e.s) + enc(e.sb) for e in items))
        rng = ChaCha20Rng(seed[:32])

        bases: List[Point] = []
        scalars: List[int] = []
        g_scalar = 0
        b_scalar = 0
        for e in items:
            w1 = rng.weight()
            w2 = rng.weight()
            bases += [e.ok, e.output, e.input, e.r, e.pk_com]
            scalars += [w1, w1 * e.c, -w1 * e.s, w2, w2 * e.c]
            g_scalar += w2 * e.s
            b_scalar += w2 * e.sb
        bases += [suite.generator(), suite.BLINDING_BASE]
        scalars += [-g_scalar, -b_scalar]
        return bases, scalars

    def verify(self) -> None:
        """Raise ``VerificationFailure`` unless every pushed proof is valid."""
        if not self.items:
            return
        bases, scalars = self.msm_terms()
        logger.debug("pedersen batch: %d proofs, %d-term MSM (%s)",
                     len(self.items), len(bases), self.suite.NAME)
        if not self.suite.curve.msm(bases, scalars).is_identity():
            raise VerificationFailure()
