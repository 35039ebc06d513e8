"""
IETF VRF proof (RFC 9381 ECVRF) with additional data.

A DLEQ proof that the same secret *x* links  (G, Y)  and  (H, Γ):

    k  = nonce(x, H)
    c  = challenge(Y, H, Γ, k·G, k·H, ad)
    s  = k + c·x

Verification recomputes the two nonce commitments

    U = s·G − c·Y,   V = s·H − c·Γ

and accepts iff  challenge(Y, H, Γ, U, V, ad) == c.

Wire format:  c (``CHALLENGE_LEN`` bytes) ‖ s (scalar encoding).

References
----------
- RFC 9381 §5.1 (ECVRF proving), §5.3 (ECVRF verifying).
- Chaum & Pedersen (1992). "Wallet Databases with Observers."
  CRYPTO 1992.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidData, VerificationFailure
from .keys import Input, Output, Public, Secret, check_suite
from .suite import Suite


@dataclass(frozen=True)
class IetfProof:
    """
    Transcript (c, s).

    ``c`` is at most ``CHALLENGE_LEN`` bytes wide, so it is serialized
    truncated to that length instead of as a full scalar.
    """

    suite: Suite
    c: int
    s: int

    @staticmethod
    def prove(
        secret: Secret,
        input: Input,
        output: Output,
        ad: bytes = b"",
    ) -> IetfProof:
        """
        Prove that  output = secret·input.

        Parameters
        ----------
        secret : Secret
            Key pair (x, Y).
        input, output : Input, Output
            VRF input H and the claimed output Γ = x·H.
        ad : bytes
            Additional data bound into the challenge.
        """
        suite = secret.suite
        check_suite(suite, input, output)
        curve = suite.curve
        x = secret.scalar

        k = suite.nonce(x, input.point)
        k_b = curve.mul(suite.generator(), k)
        k_h = curve.mul(input.point, k)
        c = suite.challenge(
            [secret.public().point, input.point, output.point, k_b, k_h], ad,
        )
        s = (k + c * x) % suite.order
        return IetfProof(suite, c, s)

    def verify(
        self,
        public: Public,
        input: Input,
        output: Output,
        ad: bytes = b"",
    ) -> None:
        """
        Raise ``VerificationFailure`` unless the proof holds.

        Check:  challenge(Y, H, Γ, s·G − c·Y, s·H − c·Γ, ad)  ==  c.
        """
        suite = self.suite
        check_suite(suite, public, input, output)
        curve = suite.curve
        u = curve.msm([suite.generator(), public.point], [self.s, -self.c])
        v = curve.msm([input.point, output.point], [self.s, -self.c])
        c = suite.challenge([public.point, input.point, output.point, u, v], ad)
        if c != self.c:
            raise VerificationFailure()

    # serialization ----------------------------------------------------------
    def to_bytes(self) -> bytes:
        suite = self.suite
        clen = suite.CHALLENGE_LEN
        c_full = suite.scalar_encode(self.c)
        c_buf = c_full[-clen:] if suite.codec.BIG_ENDIAN else c_full[:clen]
        return c_buf + suite.scalar_encode(self.s)

    @classmethod
    def from_bytes(cls, suite: Suite, data: bytes) -> IetfProof:
        clen = suite.CHALLENGE_LEN
        slen = suite.SCALAR_ENCODED_LEN
        if len(data) != clen + slen:
            raise InvalidData(f"need {clen + slen} proof bytes, got {len(data)}")
        pad = bytes(max(slen - clen, 0))
        c_buf = data[:clen]
        c_buf = pad + c_buf if suite.codec.BIG_ENDIAN else c_buf + pad
        c = suite.scalar_decode(c_buf, checked=True)
        s = suite.scalar_decode(data[clen:], checked=True)
        return cls(suite, c, s)
