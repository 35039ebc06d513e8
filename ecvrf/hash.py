"""
Domain-separated hashing for the VRF suites.

Every suite-bound hash has the shape

    Hash( suite_id ‖ tag ‖ part_1 ‖ … ‖ part_n ‖ 0x00 )

with a one-byte ``tag`` naming the protocol role, so outputs for
hash-to-curve, challenges, point-to-hash, batch weights, delinearization
and blinding are independent even when fed identical data.

Also hosts the hash-to-curve methods (RFC 9381 try-and-increment, RFC 9380
Elligator 2), the two deterministic nonce derivations (RFC 8032 and
RFC 6979 style) and the ChaCha20 byte stream used to expand hash seeds
into batch-verification weights.

References
----------
- RFC 9381  Verifiable Random Functions (VRFs), §5.4
- RFC 9380  Hashing to Elliptic Curves, §5.3.1, §6.7.1, §6.8.2
- RFC 8032  §5.1.6 (nonce derivation)
- RFC 6979  §3.2 (deterministic nonce generation)
"""

from __future__ import annotations

import hashlib
import hmac
from functools import lru_cache
from typing import TYPE_CHECKING, Callable, List, Optional, Sequence

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms

from .curve import Point, TwistedEdwardsCurve
from .field import PrimeField

if TYPE_CHECKING:
    from .suite import Suite


# ── domain tags ─────────────────────────────────────────────────────────
TAG_H2C_TAI         = 0x01
TAG_CHALLENGE       = 0x02
TAG_POINT_TO_HASH   = 0x03
TAG_BATCH_WEIGHTS   = 0x04
TAG_THIN_DELINEARIZE = 0x11
TAG_THIN_CHALLENGE  = 0x12
TAG_RING_CHALLENGE  = 0x22
TAG_RING_NONCE      = 0x23
TAG_PEDERSEN_BLIND  = 0xCC

DOM_SEP_END = b"\x00"

HasherFactory = Callable[..., "hashlib._Hash"]


def tagged_hash(suite: Suite, tag: int, *parts: bytes) -> bytes:
    """``Hash(suite_id ‖ tag ‖ parts… ‖ 0x00)`` with the suite hash."""
    h = suite.hasher()
    h.update(suite.SUITE_ID)
    h.update(bytes([tag]))
    for part in parts:
        h.update(part)
    h.update(DOM_SEP_END)
    return h.digest()


# ── deterministic byte stream ───────────────────────────────────────────
class ChaCha20Rng:
    """
    Deterministic pseudorandom byte stream: the ChaCha20 keystream under a
    32-byte seed, with zero nonce and the block counter starting at 0.

    ``read(n)`` consumes the stream in order.  Instances are also callable
    as a random source (``rng(n) -> bytes``) wherever one is accepted.
    """

    __slots__ = ("_stream",)

    SEED_LEN = 32

    def __init__(self, seed: bytes) -> None:
        if len(seed) != self.SEED_LEN:
            raise ValueError(f"ChaCha20 seed must be {self.SEED_LEN} bytes")
        cipher = Cipher(algorithms.ChaCha20(bytes(seed), bytes(16)), mode=None)
        self._stream = cipher.encryptor()

    def read(self, n: int) -> bytes:
        return self._stream.update(bytes(n))

    __call__ = read

    def weight(self, nbytes: int = 16) -> int:
        """Little-endian integer from the next *nbytes* (128-bit by default)."""
        return int.from_bytes(self.read(nbytes), "little")


# ── RFC 9380 building blocks ────────────────────────────────────────────
def expand_message_xmd(
    hasher: HasherFactory,
    msg: bytes,
    dst: bytes,
    len_in_bytes: int,
    z_pad_len: Optional[int] = None,
) -> bytes:
    """
    ``expand_message_xmd`` (RFC 9380 §5.3.1).

    *z_pad_len* overrides the length of the zero prefix ``Z_pad``, which
    RFC 9380 sets to the hash block size.

    Raises
    ------
    ValueError
        If the requested length or the DST exceed the RFC limits.
    """
    h = hasher()
    b_in_bytes = h.digest_size
    s_in_bytes = h.block_size if z_pad_len is None else z_pad_len
    ell = -(-len_in_bytes // b_in_bytes)
    if ell > 255 or len_in_bytes > 65535 or len(dst) > 255:
        raise ValueError("expand_message_xmd: parameters out of range")
    dst_prime = dst + bytes([len(dst)])
    msg_prime = (bytes(s_in_bytes) + msg + len_in_bytes.to_bytes(2, "big")
                 + b"\x00" + dst_prime)
    b_0 = hasher(msg_prime).digest()
    b_i = hasher(b_0 + b"\x01" + dst_prime).digest()
    out = [b_i]
    for i in range(2, ell + 1):
        mixed = bytes(x ^ y for x, y in zip(b_0, b_i))
        b_i = hasher(mixed + bytes([i]) + dst_prime).digest()
        out.append(b_i)
    return b"".join(out)[:len_in_bytes]


def hash_to_field(
    hasher: HasherFactory,
    field: PrimeField,
    msg: bytes,
    dst: bytes,
    count: int,
    security_bits: int = 128,
) -> List[int]:
    """
    ``hash_to_field`` (RFC 9380 §5.2) for a prime field (m = 1).

    The expander's zero prefix is L bytes (one field element's worth)
    rather than a hash block, matching the arkworks ``DefaultFieldHasher``
    that the Elligator 2 suites interoperate with.
    """
    L = -(-(field.bits + security_bits) // 8)
    uniform = expand_message_xmd(hasher, msg, dst, count * L, z_pad_len=L)
    return [field.from_be_bytes_mod_order(uniform[i * L:(i + 1) * L])
            for i in range(count)]


@lru_cache(maxsize=None)
def _ell2_z(field: PrimeField) -> int:
    """Smallest-magnitude non-square, trying ctr then −ctr (RFC 9380 find_z_ell2)."""
    ctr = 1
    while True:
        for z in (ctr, field.modulus - ctr):
            if not field.is_square(z):
                return z
        ctr += 1


def map_to_curve_ell2(curve: TwistedEdwardsCurve, u: int) -> Point:
    """
    Elligator 2 onto the Montgomery model  K·t² = s³ + J·s² + s  of a
    twisted Edwards curve (RFC 9380 §6.7.1), then the rational map to
    Edwards coordinates (RFC 9380 Appendix D.1).

    The result is on the curve but not cofactor-cleared.
    """
    F = curve.base_field
    p = F.modulus
    J, K = curve.mont_a, curve.mont_b
    Z = _ell2_z(F)
    j_over_k = J * F.inv(K) % p
    k2_inv = F.inv(K * K)

    den = (1 + Z * u * u) % p
    x1 = (-j_over_k * F.inv(den)) % p if den else (-j_over_k) % p
    if x1 == 0:
        x1 = (-j_over_k) % p
    gx1 = (x1 * x1 * x1 + j_over_k * x1 * x1 + x1 * k2_inv) % p
    if F.is_square(gx1):
        x = x1
        y = F.sqrt(gx1)
        if F.sgn0(y) != 1:
            y = (-y) % p
    else:
        x = (-x1 - j_over_k) % p
        gx2 = (x * x * x + j_over_k * x * x + x * k2_inv) % p
        y = F.sqrt(gx2)
        if F.sgn0(y) != 0:
            y = (-y) % p
    s = x * K % p
    t = y * K % p

    if t == 0 or (s + 1) % p == 0:
        return curve.identity()
    v = s * F.inv(t) % p
    w = (s - 1) * F.inv(s + 1) % p
    return Point(curve, v, w)


# ── hash-to-curve ───────────────────────────────────────────────────────
def hash_to_curve_ell2_rfc_9380(
    suite: Suite,
    data: bytes,
    h2c_suite_id: bytes,
) -> Optional[Point]:
    """
    ``hash_to_curve`` with Elligator 2 (random-oracle variant).

    DST = "ECVRF_" ‖ h2c_suite_id ‖ suite_id, as in RFC 9381 §5.4.1.2.
    """
    curve = suite.curve
    if not isinstance(curve, TwistedEdwardsCurve):
        raise ValueError("Elligator 2 is only wired for twisted Edwards curves")
    dst = b"ECVRF_" + h2c_suite_id + suite.SUITE_ID
    u0, u1 = hash_to_field(suite.hasher, curve.base_field, data, dst, 2)
    q = map_to_curve_ell2(curve, u0) + map_to_curve_ell2(curve, u1)
    return q.clear_cofactor()


def hash_to_curve_tai_rfc_9381(suite: Suite, data: bytes) -> Optional[Point]:
    """
    Try-and-increment (RFC 9381 §5.4.1.1).

    Hashes ``suite_id ‖ 0x01 ‖ data ‖ ctr ‖ 0x00`` for ctr = 0..255 and
    reads each digest as a candidate encoding (see
    ``Codec.candidate_point``); the first candidate that decodes and is
    not the identity after cofactor clearing wins.  ``data`` is
    ``salt ‖ alpha`` in RFC terms; no salt is added here.

    Returns ``None`` if all 256 attempts fail.
    """
    codec = suite.codec
    for ctr in range(256):
        digest = tagged_hash(suite, TAG_H2C_TAI, data, bytes([ctr]))
        pt = codec.candidate_point(digest)
        if pt is None:
            continue
        pt = pt.clear_cofactor()
        if not pt.is_identity():
            return pt
    return None


# ── nonces ──────────────────────────────────────────────────────────────
def nonce_rfc_8032(suite: Suite, sk: int, input_point: Point) -> int:
    """
    Deterministic nonce after RFC 8032 §5.1.6 (RFC 9381 §5.4.2.2).

        k = Hash( Hash(sk)[32:] ‖ point_encode(input) )  mod q

    Raises ``ValueError`` when the suite hash is shorter than 64 bytes.
    """
    codec = suite.codec
    sk_hash = suite.hash(codec.scalar_encode(sk))
    if len(sk_hash) < 64:
        raise ValueError("RFC 8032 nonce requires a hash of at least 64 bytes")
    digest = suite.hash(sk_hash[32:] + codec.point_encode(input_point))
    return suite.scalar_field.from_le_bytes_mod_order(digest)


def nonce_rfc_6979(suite: Suite, sk: int, input_point: Point) -> int:
    """
    Deterministic nonce after RFC 6979 §3.2 (RFC 9381 §5.4.2.1).

    HMAC-DRBG keyed by ``int2octets(sk)`` and ``bits2octets(Hash(encode(H)))``,
    looping until 1 ≤ k < q.
    """
    q = suite.curve.order
    qlen = q.bit_length()
    rlen = (qlen + 7) // 8

    def bits2int(b: bytes) -> int:
        v = int.from_bytes(b, "big")
        excess = len(b) * 8 - qlen
        return v >> excess if excess > 0 else v

    def mac(key: bytes, msg: bytes) -> bytes:
        return hmac.new(key, msg, suite.hasher).digest()

    h1 = suite.hash(suite.codec.point_encode(input_point))
    x = (sk % q).to_bytes(rlen, "big")
    h1_octets = (bits2int(h1) % q).to_bytes(rlen, "big")

    hlen = suite.hasher().digest_size
    v = b"\x01" * hlen
    k = b"\x00" * hlen
    k = mac(k, v + b"\x00" + x + h1_octets)
    v = mac(k, v)
    k = mac(k, v + b"\x01" + x + h1_octets)
    v = mac(k, v)
    while True:
        t = b""
        while len(t) < rlen:
            v = mac(k, v)
            t += v
        nonce = bits2int(t[:rlen])
        if 1 <= nonce < q:
            return nonce
        k = mac(k, v + b"\x00")
        v = mac(k, v)


# ── challenge / output ──────────────────────────────────────────────────
def challenge_rfc_9381(suite: Suite, points: Sequence[Point], ad: bytes) -> int:
    """
    Challenge (RFC 9381 §5.4.3) extended with additional data:

        c = Hash( suite_id ‖ 0x02 ‖ P_1 ‖ … ‖ P_n ‖ ad ‖ 0x00 )[:cLen]
    """
    codec = suite.codec
    digest = tagged_hash(
        suite, TAG_CHALLENGE, *(codec.point_encode(p) for p in points), ad,
    )
    return codec.scalar_decode(digest[:suite.CHALLENGE_LEN])


def point_to_hash_rfc_9381(
    suite: Suite,
    pt: Point,
    mul_by_cofactor: bool = False,
) -> bytes:
    """VRF output bytes  Hash( suite_id ‖ 0x03 ‖ encode(Γ) ‖ 0x00 )."""
    if mul_by_cofactor:
        pt = pt.clear_cofactor()
    return tagged_hash(suite, TAG_POINT_TO_HASH, suite.codec.point_encode(pt))
