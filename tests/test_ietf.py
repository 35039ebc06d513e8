# tests for IETF VRF proofs and the batch-compatible variant

import pytest

from ecvrf import Input, Output, Secret
from ecvrf.errors import InvalidData, VerificationFailure
from ecvrf.ietf import IetfProof
from ecvrf.ietf_bc import IetfBcBatchVerifier, IetfBcProof


class TestIetfProof:
    """tests for the RFC 9381 proof with additional data."""

    def test_prove_verify(self, secret, vrf_io):
        vrf_in, vrf_out = vrf_io
        proof = IetfProof.prove(secret, vrf_in, vrf_out, b"ad")
        proof.verify(secret.public(), vrf_in, vrf_out, b"ad")

    def test_default_ad_is_empty(self, secret, vrf_io):
        vrf_in, vrf_out = vrf_io
        proof = IetfProof.prove(secret, vrf_in, vrf_out)
        proof.verify(secret.public(), vrf_in, vrf_out, b"")

    def test_wrong_ad_rejected(self, secret, vrf_io):
        vrf_in, vrf_out = vrf_io
        proof = IetfProof.prove(secret, vrf_in, vrf_out, b"ad")
        with pytest.raises(VerificationFailure):
            proof.verify(secret.public(), vrf_in, vrf_out, b"other")

    def test_wrong_output_rejected(self, suite, secret, vrf_io):
        vrf_in, vrf_out = vrf_io
        proof = IetfProof.prove(secret, vrf_in, vrf_out)
        forged = secret.output(Input.new(suite, b"another input"))
        with pytest.raises(VerificationFailure):
            proof.verify(secret.public(), vrf_in, forged)

    def test_wrong_public_rejected(self, suite, secret, vrf_io):
        vrf_in, vrf_out = vrf_io
        proof = IetfProof.prove(secret, vrf_in, vrf_out)
        other = Secret.from_seed(suite, b"other").public()
        with pytest.raises(VerificationFailure):
            proof.verify(other, vrf_in, vrf_out)

    def test_tampered_response_rejected(self, secret, vrf_io):
        vrf_in, vrf_out = vrf_io
        proof = IetfProof.prove(secret, vrf_in, vrf_out)
        bad = IetfProof(proof.suite, proof.c, (proof.s + 1) % proof.suite.order)
        with pytest.raises(VerificationFailure):
            bad.verify(secret.public(), vrf_in, vrf_out)

    def test_deterministic(self, secret, vrf_io):
        vrf_in, vrf_out = vrf_io
        a = IetfProof.prove(secret, vrf_in, vrf_out, b"ad")
        b = IetfProof.prove(secret, vrf_in, vrf_out, b"ad")
        assert a == b

    def test_bytes_round_trip(self, suite, secret, vrf_io):
        vrf_in, vrf_out = vrf_io
        proof = IetfProof.prove(secret, vrf_in, vrf_out)
        buf = proof.to_bytes()
        assert len(buf) == suite.CHALLENGE_LEN + suite.SCALAR_ENCODED_LEN
        decoded = IetfProof.from_bytes(suite, buf)
        assert decoded == proof
        decoded.verify(secret.public(), vrf_in, vrf_out)

    def test_bad_length_rejected(self, suite, secret, vrf_io):
        vrf_in, vrf_out = vrf_io
        buf = IetfProof.prove(secret, vrf_in, vrf_out).to_bytes()
        with pytest.raises(InvalidData):
            IetfProof.from_bytes(suite, buf + b"\x00")


class TestIetfBcProof:
    """tests for the batch-compatible proof."""

    def test_prove_verify(self, suite, secret, vrf_io):
        vrf_in, vrf_out = vrf_io
        proof = IetfBcProof.prove(secret, vrf_in, vrf_out, b"ad")
        proof.verify(secret.public(), vrf_in, vrf_out, b"ad")
        with pytest.raises(VerificationFailure):
            proof.verify(secret.public(), vrf_in, vrf_out, b"")

    def test_same_nonce_as_ietf(self, suite, secret, vrf_io):
        vrf_in, vrf_out = vrf_io
        bc = IetfBcProof.prove(secret, vrf_in, vrf_out, b"ad")
        ietf = IetfProof.prove(secret, vrf_in, vrf_out, b"ad")
        assert bc.s == ietf.s

    def test_deterministic(self, secret, vrf_io):
        vrf_in, vrf_out = vrf_io
        a = IetfBcProof.prove(secret, vrf_in, vrf_out, b"ad")
        b = IetfBcProof.prove(secret, vrf_in, vrf_out, b"ad")
        assert a.to_bytes() == b.to_bytes()

    def test_other_ad_rejected(self, secret, vrf_io):
        vrf_in, vrf_out = vrf_io
        proof = IetfBcProof.prove(secret, vrf_in, vrf_out, b"ad")
        with pytest.raises(VerificationFailure):
            proof.verify(secret.public(), vrf_in, vrf_out, b"da")

    def test_swapped_input_output_rejected(self, suite, secret, vrf_io):
        vrf_in, vrf_out = vrf_io
        proof = IetfBcProof.prove(secret, vrf_in, vrf_out, b"ad")
        with pytest.raises(VerificationFailure):
            proof.verify(secret.public(), Input(suite, vrf_out.point),
                         Output(suite, vrf_in.point), b"ad")

    def test_bytes_round_trip(self, suite, secret, vrf_io):
        vrf_in, vrf_out = vrf_io
        proof = IetfBcProof.prove(secret, vrf_in, vrf_out)
        buf = proof.to_bytes()
        assert len(buf) == 2 * suite.POINT_ENCODED_LEN + suite.SCALAR_ENCODED_LEN
        assert IetfBcProof.from_bytes(suite, buf) == proof
        with pytest.raises(InvalidData):
            IetfBcProof.from_bytes(suite, buf[:-1])


def _bc_items(suite, n, ad=b"ad"):
    items = []
    for i in range(n):
        sk = Secret.from_seed(suite, bytes([i]))
        vrf_in = Input.new(suite, b"input %d" % i)
        vrf_out = sk.output(vrf_in)
        proof = IetfBcProof.prove(sk, vrf_in, vrf_out, ad)
        items.append((sk.public(), vrf_in, vrf_out, ad, proof))
    return items


class TestIetfBcBatch:
    """tests for IetfBcBatchVerifier."""

    def test_empty_batch_verifies(self, suite):
        batch = IetfBcBatchVerifier(suite)
        assert len(batch) == 0
        batch.verify()

    def test_valid_batch(self, suite):
        batch = IetfBcBatchVerifier(suite)
        for item in _bc_items(suite, 3):
            batch.push(*item)
        assert len(batch) == 3
        batch.verify()
        # verify leaves the accumulator intact
        batch.verify()

    def test_one_bad_item(self, suite):
        batch = IetfBcBatchVerifier(suite)
        items = _bc_items(suite, 3)
        pk, vrf_in, vrf_out, _, proof = items[1]
        items[1] = (pk, vrf_in, vrf_out, b"wrong ad", proof)
        for item in items:
            batch.push(*item)
        with pytest.raises(VerificationFailure):
            batch.verify()

    def test_prepare_then_push(self, suite):
        batch = IetfBcBatchVerifier(suite)
        prepared = [IetfBcBatchVerifier.prepare(*item) for item in _bc_items(suite, 2)]
        for item in prepared:
            batch.push_prepared(item)
        batch.verify()
