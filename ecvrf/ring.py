"""
Ring VRF: a Pedersen VRF proof plus anonymous ring membership.

A ring proof is the pair

    (pedersen_proof, membership_proof)

where the Pedersen proof shows the VRF output is correct for the key
hidden in  Y_b = x·G + b·B,  and the membership proof (see
``ring_proof``) shows Y_b hides one of the ring's public keys.  The
verifier learns the output and that *some* ring member produced it.

Sizing
------
The ring relation reserves a fixed overhead of  4 + scalar_bits  slots
in a power-of-two domain:

    piop_domain_size(n) = next_pow2(n + overhead)
    pcs_domain_size(n)  = 3 · piop_domain_size(n) + 1
    max_ring_size(n)    = piop_domain_size(n) − overhead   (≥ n)

so a setup built for *n* members accepts rings up to ``max_ring_size``.

References
----------
- Burdges, Ciobotaru, Alper, Stewart, Vasilyev (2023). "Ring Verifiable
  Random Functions and Zero-Knowledge Continuations."  ePrint 2023/002.
"""

from __future__ import annotations

import logging
import secrets
import sys
from dataclasses import dataclass
from functools import cached_property
from typing import ClassVar, List, Optional, Sequence, Tuple, Union

from . import ring_proof as rp
from .curve import Point
from .errors import InvalidData, RingCapacityError, VerificationFailure
from .field import RandomSource
from .keys import Input, Output, Secret
from .kzg import G1Point, PairingGroup
from .pedersen import (
    PedersenBatchItem,
    PedersenBatchVerifier,
    PedersenProof,
    PedersenSuite,
)
from .ring_proof import (
    MembershipProof,
    PcsParams,
    PiopParams,
    PreparedMembership,
    RingCommitment,
    RingProver,
    RingProverKey,
    RingVerifier,
    RingVerifierKey,
)

logger = logging.getLogger(__name__)

ACCUMULATOR_BASE_SEED = (
    b"substratum accumulatoris quod in silentio temporis arcanum absconditum custodit"
)
PADDING_SEED = (
    b"umbra quae vacuum implet ab animabus perditis relictum inter tenebras resonans"
)


class RingSuite(PedersenSuite):
    """
    Pedersen suite with the extra fixed points of the ring relation.

    ``PAIRING`` is the pairing group whose scalar field is this curve's
    base field; ring commitments live in its G1.
    """

    PAIRING: ClassVar[PairingGroup]

    @cached_property
    def ACCUMULATOR_BASE(self) -> Point:
        return self._seed_point(ACCUMULATOR_BASE_SEED, "accumulator base")

    @cached_property
    def PADDING(self) -> Point:
        return self._seed_point(PADDING_SEED, "padding point")

    def _seed_point(self, seed: bytes, what: str) -> Point:
        pt = self.data_to_point(seed)
        if pt is None:
            raise ValueError(f"{self.NAME}: cannot derive the {what}")
        return pt


# ── sizing ──────────────────────────────────────────────────────────────
def piop_overhead(suite: RingSuite) -> int:
    return 4 + suite.scalar_field.bits


def _next_pow2(n: int) -> int:
    return 1 << max(n - 1, 0).bit_length()


def piop_domain_size(suite: RingSuite, ring_size: int) -> int:
    """Smallest power of two holding *ring_size* keys plus the overhead."""
    return _next_pow2(ring_size + piop_overhead(suite))


def pcs_domain_size(suite: RingSuite, ring_size: int) -> int:
    return pcs_domain_size_from_piop_domain_size(piop_domain_size(suite, ring_size))


def pcs_domain_size_from_piop_domain_size(domain_size: int) -> int:
    return 3 * domain_size + 1


def piop_domain_size_from_pcs_domain_size(pcs_size: int) -> int:
    """
    Largest power of two  d  with  3d + 1 ≤ pcs_size.

    Raises ``RingCapacityError`` (``available`` 0) when *pcs_size* is
    below 4 and no domain fits.
    """
    if pcs_size < pcs_domain_size_from_piop_domain_size(1):
        raise RingCapacityError(0, f"setup of size {pcs_size} fits no domain")
    return 1 << (((pcs_size - 1) // 3).bit_length() - 1)


def max_ring_size_from_piop_domain_size(suite: RingSuite, domain_size: int) -> int:
    return domain_size - piop_overhead(suite)


def max_ring_size(suite: RingSuite, ring_size: int) -> int:
    """Actual capacity of the domain chosen for *ring_size* (≥ ring_size)."""
    return max_ring_size_from_piop_domain_size(suite, piop_domain_size(suite, ring_size))


def max_ring_size_from_pcs_domain_size(suite: RingSuite, pcs_size: int) -> int:
    return max_ring_size_from_piop_domain_size(
        suite, piop_domain_size_from_pcs_domain_size(pcs_size)
    )


def _piop_params(suite: RingSuite, domain_size: int) -> PiopParams:
    return PiopParams(suite, domain_size,
                      max_ring_size_from_piop_domain_size(suite, domain_size))


# ── parameters ──────────────────────────────────────────────────────────
class RingBuilderPcsParams:
    """Setup segment a ``VerifierKeyBuilder`` draws its bases from."""

    def __init__(self, pcs: PcsParams, piop: PiopParams, size: int) -> None:
        self.pcs = pcs
        self.piop = piop
        self.size = size

    def lookup(self, start: int, stop: int) -> Optional[List[G1Point]]:
        """Lagrange bases [L_i(τ)]₁ of ring rows  start ≤ i < stop."""
        if stop > self.size:
            return None
        return self.pcs.urs.lagrangian(self.piop.domain, start, stop)

    def __len__(self) -> int:
        return self.size


class RingProofParams:
    """
    Ring setup: commitment bases plus the relation parameters.

    Immutable once built and safe to share between any number of provers
    and verifiers.
    """

    def __init__(self, suite: RingSuite, pcs: PcsParams, piop: PiopParams) -> None:
        if suite.curve.base_field.modulus != suite.PAIRING.order:
            raise ValueError(f"{suite.NAME}: base field is not the {suite.PAIRING.name} scalar field")
        self.suite = suite
        self.pcs = pcs
        self.piop = piop

    # construction -----------------------------------------------------------
    @classmethod
    def from_seed(cls, suite: RingSuite, ring_size: int, seed: bytes) -> RingProofParams:
        """Deterministic setup for rings of at least *ring_size* keys."""
        pcs = PcsParams.setup(suite, pcs_domain_size(suite, ring_size), seed)
        return cls.from_pcs_params(suite, ring_size, pcs)

    @classmethod
    def from_rand(
        cls,
        suite: RingSuite,
        ring_size: int,
        rng: Optional[RandomSource] = None,
    ) -> RingProofParams:
        fill = rng or secrets.token_bytes
        return cls.from_seed(suite, ring_size, fill(rp.SEED_LEN))

    @classmethod
    def from_pcs_params(
        cls,
        suite: RingSuite,
        ring_size: int,
        pcs: PcsParams,
    ) -> RingProofParams:
        """
        Build from an existing (possibly larger) setup, truncated to size.

        Raises
        ------
        InvalidData
            The setup has fewer bases than ``pcs_domain_size(ring_size)``.
        """
        if pcs.suite is not suite:
            raise ValueError("setup belongs to another suite")
        need = pcs_domain_size(suite, ring_size)
        if pcs.size < need:
            raise InvalidData(f"setup of size {pcs.size} too small, need {need}")
        params = cls(suite, pcs.truncate(need),
                     _piop_params(suite, piop_domain_size(suite, ring_size)))
        logger.debug("ring params for %s: domain %d, capacity %d",
                     suite.NAME, params.piop.domain_size, params.max_ring_size())
        return params

    def max_ring_size(self) -> int:
        return self.piop.keyset_part_size

    # keys -------------------------------------------------------------------
    def _ring(self, pks: Sequence[Point]) -> List[Point]:
        return list(pks[:self.max_ring_size()])

    def prover_key(self, pks: Sequence[Point]) -> RingProverKey:
        """Prover key for the ring *pks* (truncated to ``max_ring_size``)."""
        return rp.index(self.pcs, self.piop, self._ring(pks))[0]

    def prover(self, prover_key: RingProverKey, key_index: int) -> RingProver:
        return RingProver(prover_key, self.piop, key_index)

    def verifier_key(self, pks: Sequence[Point]) -> RingVerifierKey:
        return rp.index(self.pcs, self.piop, self._ring(pks))[1]

    def verifier_key_from_commitment(self, commitment: RingCommitment) -> RingVerifierKey:
        return RingVerifierKey.from_commitment(commitment, self.pcs.raw_vk())

    def verifier_key_builder(self) -> Tuple[VerifierKeyBuilder, RingBuilderPcsParams]:
        """
        Incremental verifier-key construction.

        Returns the empty builder and the setup segment to look bases up
        in; the segment may be stored and served separately.
        """
        segment = RingBuilderPcsParams(self.pcs, self.piop, self.max_ring_size())
        return VerifierKeyBuilder(self), segment

    def verifier(self, verifier_key: RingVerifierKey) -> RingVerifier:
        return RingVerifier(verifier_key, self.piop)

    @staticmethod
    def verifier_no_context(verifier_key: RingVerifierKey, ring_size: int) -> RingVerifier:
        """Verifier for a key alone, re-deriving the relation from *ring_size*."""
        suite = verifier_key.commitment.suite
        return RingVerifier(
            verifier_key, _piop_params(suite, piop_domain_size(suite, ring_size)),
        )

    def padding_point(self) -> Point:
        """Filler for ring slots without a usable key."""
        return self.suite.PADDING

    # serialization ----------------------------------------------------------
    def to_bytes(self) -> bytes:
        return self.pcs.to_bytes()

    @classmethod
    def from_bytes(cls, suite: RingSuite, data: bytes) -> RingProofParams:
        pcs = PcsParams.from_bytes(suite, data)
        domain = piop_domain_size_from_pcs_domain_size(pcs.size)
        if max_ring_size_from_piop_domain_size(suite, domain) < 1:
            raise InvalidData("setup too small for any ring")
        return cls(suite, pcs, _piop_params(suite, domain))

    def __repr__(self) -> str:
        return (f"RingProofParams({self.suite.NAME}, "
                f"max_ring_size={self.max_ring_size()})")


# ── incremental verifier key ────────────────────────────────────────────
Lookup = Union[RingBuilderPcsParams, rp.SrsLookup]


class VerifierKeyBuilder:
    """
    Builds a ``RingVerifierKey`` from chunks of keys.

    Only the running commitment is kept, so rings can be streamed in
    without ever holding all keys in memory.
    """

    def __init__(self, params: RingProofParams) -> None:
        self.piop = params.piop
        self.vk = params.pcs.raw_vk()
        self.max_keys = params.max_ring_size()
        self.curr_keys = 0
        # every key row starts out as padding
        self.partial = rp.commit(params.pcs, params.piop, [])

    def free_slots(self) -> int:
        return self.max_keys - self.curr_keys

    def append(self, pks: Sequence[Point], lookup: Lookup) -> None:
        """
        Add the next keys of the ring.

        Raises
        ------
        RingCapacityError
            ``available`` is the number of free slots when *pks* does not
            fit, or ``sys.maxsize`` when *lookup* has no bases for them.
        """
        avail = self.free_slots()
        if avail < len(pks):
            raise RingCapacityError(avail)
        fetch = getattr(lookup, "lookup", lookup)
        segment = fetch(self.curr_keys, self.curr_keys + len(pks))
        if segment is None or len(segment) != len(pks):
            raise RingCapacityError(sys.maxsize, "setup segment lookup failed")
        self.partial = rp.accumulate(self.partial, self.piop, pks, segment)
        self.curr_keys += len(pks)
        logger.debug("ring builder: +%d keys, %d/%d", len(pks),
                     self.curr_keys, self.max_keys)

    def finalize(self) -> RingVerifierKey:
        return RingVerifierKey(self.partial, self.vk)


# ── proof ───────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class RingProof:
    """Pedersen VRF proof and membership proof for its key commitment."""

    pedersen_proof: PedersenProof
    ring_proof: MembershipProof

    @staticmethod
    def prove(
        secret: Secret,
        input: Input,
        output: Output,
        ad: bytes,
        prover: RingProver,
    ) -> RingProof:
        pedersen_proof, blinding = PedersenProof.prove(secret, input, output, ad)
        return RingProof(pedersen_proof, prover.prove(blinding))

    def verify(
        self,
        input: Input,
        output: Output,
        ad: bytes,
        verifier: RingVerifier,
    ) -> None:
        """Raise ``VerificationFailure`` unless both component proofs hold."""
        self.pedersen_proof.verify(input, output, ad)
        if not verifier.verify(self.ring_proof, self.pedersen_proof.key_commitment()):
            raise VerificationFailure()

    def to_bytes(self) -> bytes:
        return self.pedersen_proof.to_bytes() + self.ring_proof.to_bytes()

    @classmethod
    def from_bytes(cls, suite: RingSuite, data: bytes) -> RingProof:
        n = PedersenProof.encoded_len(suite)
        return cls(
            PedersenProof.from_bytes(suite, data[:n]),
            MembershipProof.from_bytes(suite, data[n:]),
        )


@dataclass(frozen=True)
class RingBatchItem:
    pedersen: PedersenBatchItem
    ring: PreparedMembership


class RingBatchVerifier:
    """Pedersen batch and membership batch over one ring verifier."""

    def __init__(self, verifier: RingVerifier) -> None:
        suite = verifier.piop.suite
        self.pedersen_batch = PedersenBatchVerifier(suite)
        self.ring_batch = verifier.batch_verifier()

    def prepare(
        self,
        input: Input,
        output: Output,
        ad: bytes,
        proof: RingProof,
    ) -> RingBatchItem:
        pedersen = PedersenBatchVerifier.prepare(input, output, ad, proof.pedersen_proof)
        ring = self.ring_batch.prepare(
            proof.ring_proof, proof.pedersen_proof.key_commitment(),
        )
        return RingBatchItem(pedersen, ring)

    def push_prepared(self, item: RingBatchItem) -> None:
        self.pedersen_batch.push_prepared(item.pedersen)
        self.ring_batch.push_prepared(item.ring)

    def push(self, input: Input, output: Output, ad: bytes, proof: RingProof) -> None:
        self.push_prepared(self.prepare(input, output, ad, proof))

    def __len__(self) -> int:
        return len(self.pedersen_batch)

    def verify(self) -> None:
        self.pedersen_batch.verify()
        if not self.ring_batch.verify():
            raise VerificationFailure()
