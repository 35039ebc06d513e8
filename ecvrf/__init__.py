"""
ecvrf: Elliptic Curve Verifiable Random Functions with additional data.

Four proof schemes over a common cipher-suite abstraction:

- **IETF VRF**, RFC 9381 ECVRF extended with additional data, plus a
  batch-verifiable variant carrying the nonce commitments
- **Pedersen VRF**, proving against a blinded key commitment
  [Burdges et al., ePrint 2023/002]
- **Thin VRF**, one delinearized Schnorr equation per proof
- **Ring VRF**, Pedersen VRF plus anonymous ring membership

Every scheme has single and batch verification; batches fold into one
multi-scalar multiplication, or one pairing check for ring membership.

Quick start
-----------
::

    from ecvrf import Input, Secret, IetfProof
    from ecvrf.suites import BANDERSNATCH_SHA512_ELL2 as suite

    secret = Secret.from_seed(suite, b"seed")
    vrf_in = Input.new(suite, b"input")
    vrf_out = secret.output(vrf_in)

    proof = IetfProof.prove(secret, vrf_in, vrf_out, b"ad")
    proof.verify(secret.public(), vrf_in, vrf_out, b"ad")
    randomness = vrf_out.hash()
"""

__version__ = "0.4.0"

# ── core types ──────────────────────────────────────────────────────────
from .field import PrimeField
from .curve import Curve, CurveForm, Point, ShortWeierstrassCurve, TwistedEdwardsCurve
from .codec import ArkworksCodec, Codec, Endianness, Sec1Codec
from .errors import Error, InvalidData, RingCapacityError, VerificationFailure

# ── suites and keys ─────────────────────────────────────────────────────
from .suite import Suite
from .keys import Input, Output, Public, Secret
from . import suites

# ── proof schemes ───────────────────────────────────────────────────────
from .ietf import IetfProof
from .ietf_bc import IetfBcBatchItem, IetfBcBatchVerifier, IetfBcProof
from .pedersen import (
    PedersenBatchItem,
    PedersenBatchVerifier,
    PedersenProof,
    PedersenSuite,
)
from .thin import ThinBatchItem, ThinBatchVerifier, ThinProof

# ── ring VRF ────────────────────────────────────────────────────────────
from .ring import (
    RingBatchItem,
    RingBatchVerifier,
    RingBuilderPcsParams,
    RingProof,
    RingProofParams,
    RingSuite,
    VerifierKeyBuilder,
    max_ring_size,
    pcs_domain_size,
    piop_domain_size,
    piop_domain_size_from_pcs_domain_size,
)
from .ring_proof import (
    MembershipProof,
    PcsParams,
    PiopParams,
    RingCommitment,
    RingProver,
    RingProverKey,
    RingVerifier,
    RingVerifierKey,
)

__all__ = [
    # version
    "__version__",
    # core
    "PrimeField", "Curve", "CurveForm", "Point",
    "ShortWeierstrassCurve", "TwistedEdwardsCurve",
    "ArkworksCodec", "Codec", "Endianness", "Sec1Codec",
    # errors
    "Error", "InvalidData", "RingCapacityError", "VerificationFailure",
    # suites and keys
    "Suite", "suites", "Input", "Output", "Public", "Secret",
    # ietf
    "IetfProof", "IetfBcProof", "IetfBcBatchItem", "IetfBcBatchVerifier",
    # pedersen
    "PedersenSuite", "PedersenProof", "PedersenBatchItem", "PedersenBatchVerifier",
    # thin
    "ThinProof", "ThinBatchItem", "ThinBatchVerifier",
    # ring
    "RingSuite", "RingProof", "RingProofParams", "RingBatchItem",
    "RingBatchVerifier", "RingBuilderPcsParams", "VerifierKeyBuilder",
    "max_ring_size", "pcs_domain_size", "piop_domain_size",
    "piop_domain_size_from_pcs_domain_size",
    "MembershipProof", "PcsParams", "PiopParams", "RingCommitment",
    "RingProver", "RingProverKey", "RingVerifier", "RingVerifierKey",
]
