"""
Domain parameters of the curves used by the bundled suites.

References
----------
- Masson, Sanso, Zhang (2021). "Bandersnatch: a fast elliptic curve built
  over the BLS12-381 scalar field."  ePrint 2021/1152.
- EIP-2494  Baby Jubjub elliptic curve.  The model below is the arkworks
  ``ed_on_bn254`` one (a = 1), isomorphic to EIP-2494 via x' = sqrt(168700)·x.
- RFC 8032 §5.1  edwards25519.
- SEC 2 v2 §2.4.2 / FIPS 186-4 D.1.2.3  secp256r1 (NIST P-256).
- SEC 2 v2 §2.4.1  secp256k1.
"""

from __future__ import annotations

import ecdsa

from .curve import Secp256k1Curve, ShortWeierstrassCurve, TwistedEdwardsCurve
from .field import PrimeField

# ── Bandersnatch (over the BLS12-381 scalar field) ──────────────────────
_BLS12_381_R = 0x73EDA753299D7D483339D80809A1D80553BDA402FFFE5BFEFFFFFFFF00000001

BANDERSNATCH = TwistedEdwardsCurve(
    "bandersnatch",
    base_field=PrimeField(_BLS12_381_R),
    scalar_field=PrimeField(
        0x1CFB69D4CA675F520CCE760202687600FF8F87007419047174FD06B52876E7E1
    ),
    cofactor=4,
    a=-5,
    d=45022363124591815672509500913686876175488063829319466900776701791074614335719,
    generator=(
        0x29C132CC2C0B34C5743711777BBE42F32B79C022AD998465E1E71866A252AE18,
        0x2A6C669EDA123E0F157D8B50BADCD586358CAD81EEE464605E3167B6CC974166,
    ),
)

# Same group in short Weierstrass form; the generator is the image of the
# twisted Edwards one.
BANDERSNATCH_SW = BANDERSNATCH.sw

# ── Baby-JubJub (over the BN254 scalar field) ───────────────────────────
BABY_JUBJUB = TwistedEdwardsCurve(
    "baby-jubjub",
    base_field=PrimeField(
        21888242871839275222246405745257275088548364400416034343698204186575808495617
    ),
    scalar_field=PrimeField(
        2736030358979909402780800718157159386076813972158567259200215660948447373041
    ),
    cofactor=8,
    a=1,
    # 168696 / 168700
    d=9706598848417545097372247223557719406784115219466060233080913168975159366771,
    generator=(
        19698561148652590122159747500897617769866003486955115824547446575314762165298,
        19298250018296453272277890825869354524455968081175474282777126169995084727839,
    ),
)

# ── edwards25519 and NIST P-256 (ecdsa named curves) ────────────────────
ED25519 = TwistedEdwardsCurve.from_ecdsa("ed25519", ecdsa.Ed25519)

SECP256R1 = ShortWeierstrassCurve.from_ecdsa("secp256r1", ecdsa.NIST256p)

# ── secp256k1 (libsecp256k1 backend) ────────────────────────────────────
SECP256K1 = Secp256k1Curve()
