# RFC 9381 appendix B.1 known-answer tests (ECVRF-P256-SHA256-TAI) and
# fixed Bandersnatch proofs

import pytest

from ecvrf import IetfProof, Input, Output, PedersenProof, Public, Secret, suites

SK = "c9afa9d845ba75166b5c215767b1d6934e50c3db36e89b127b8a622b120f6721"
PK = "0360fed4ba255a9d31c961eb74c6356d68c049b8923b61fa6ce669622e60f29fb6"

VECTORS = [
    {
        "alpha": b"sample",
        "h": "0272a877532e9ac193aff4401234266f59900a4a9e3fc3cfc6a4b7e467a15d06d4",
        "pi": "035b5c726e8c0e2c488a107c600578ee75cb702343c153cb1eb8dec77f4b5071b4"
              "a53f0a46f018bc2c56e58d383f2305e0975972c26feea0eb122fe7893c15af376b"
              "33edf7de17c6ea056d4d82de6bc02f",
        "beta": "a3ad7b0ef73d8fc6655053ea22f9bede8c743f08bbed3d38821f0e16474b505e",
    },
    {
        "alpha": b"test",
        "h": "02173119b4fff5e6f8afed4868a29fe8920f1b54c2cf89cc7b301d0d473de6b974",
        "pi": "034dac60aba508ba0c01aa9be80377ebd7562c4a52d74722e0abae7dc3080ddb56"
              "c19e067b15a8a8174905b13617804534214f935b94c2287f797e393eb0816969d8"
              "64f37625b443f30f1a5a33f2b3c854",
        "beta": "a284f94ceec2ff4b3794629da7cbafa49121972671b466cab4ce170aa365f26d",
    },
]


class TestP256Sha256Tai:
    """ECVRF-P256-SHA256-TAI with empty additional data."""

    suite = suites.P256_SHA256_TAI

    def test_public_key(self):
        sk = Secret.from_bytes(self.suite, bytes.fromhex(SK))
        assert sk.public().to_bytes().hex() == PK

    @pytest.mark.parametrize("v", VECTORS, ids=lambda v: v["alpha"].decode())
    def test_hash_to_curve(self, v):
        salt = bytes.fromhex(PK)
        vrf_in = Input.new(self.suite, salt + v["alpha"])
        assert vrf_in.to_bytes().hex() == v["h"]

    @pytest.mark.parametrize("v", VECTORS, ids=lambda v: v["alpha"].decode())
    def test_prove(self, v):
        sk = Secret.from_bytes(self.suite, bytes.fromhex(SK))
        vrf_in = Input.new(self.suite, bytes.fromhex(PK) + v["alpha"])
        vrf_out = sk.output(vrf_in)
        proof = IetfProof.prove(sk, vrf_in, vrf_out)

        pi = bytes.fromhex(v["pi"])
        assert vrf_out.to_bytes() == pi[:33]
        assert proof.to_bytes() == pi[33:]
        assert vrf_out.hash().hex() == v["beta"]

    @pytest.mark.parametrize("v", VECTORS, ids=lambda v: v["alpha"].decode())
    def test_verify_from_bytes(self, v):
        pk = Public.from_bytes(self.suite, bytes.fromhex(PK))
        vrf_in = Input.new(self.suite, bytes.fromhex(PK) + v["alpha"])
        pi = bytes.fromhex(v["pi"])
        vrf_out = Output.from_bytes(self.suite, pi[:33])
        IetfProof.from_bytes(self.suite, pi[33:]).verify(pk, vrf_in, vrf_out)


class TestBandersnatchFixedProofs:
    """
    Bandersnatch_SHA-512_ELL2 proofs for the secret derived from b"seed",
    input b"input" and additional data b"ad".
    """

    suite = suites.BANDERSNATCH_SHA512_ELL2
    ad = b"ad"

    PUBLIC = "d896980634bff02a7b9fdad48cca6ee68ea8ea43a2e0db7812afad7c438d8a4b"
    INPUT = "ac48cabe9331b6e95e532268a686d188a185ac76dd88e5d8f151fe6e5847be60"
    OUTPUT = "8aa79f45a61dafbc710c2ae75e0ed754b94d6c038e553248ff97a45bacad3a05"

    IETF_C = "69cacaa948ac94b8ce288b446c668351b05f624223a4ea8139a1c0bb58f4dd1b"
    IETF_S = "a8a3608bf6398ad1ecf49d4d558475ef8c3d3591f00109cba88d5d453ff6721a"

    BLINDING = "ee1815dad1c7dabe3f3c4a99f1402a8661a7ad8d652a3ee4423e889c4d46cc0f"
    PK_COM = "0dd51af49e5eb76e46f74ab03a1ac29d752778e6e8d04d8809d575d20aa6b736"
    R = "2ed1da7c88463d60450f198cda6cb026a72037e01c0e82fa57fa4691c1bb5244"
    OK = "b9cec0d4807f3095d7f058940b885f8411f8b1eba671996fdf112703923da18d"
    S = "fd31ff519b41789a998d85b6ab01a53159bb98d8cef26011488265e1d43b4f0a"
    SB = "26b1d6cd23d86015eb1efd073b993c7bd7db014bb2aa626413914f867f9b4f04"

    def _io(self):
        sk = Secret.from_seed(self.suite, b"seed")
        vrf_in = Input.new(self.suite, b"input")
        return sk, vrf_in, sk.output(vrf_in)

    def test_keys_and_points(self):
        sk, vrf_in, vrf_out = self._io()
        assert sk.public().to_bytes().hex() == self.PUBLIC
        assert vrf_in.to_bytes().hex() == self.INPUT
        assert vrf_out.to_bytes().hex() == self.OUTPUT

    def test_ietf_proof(self):
        sk, vrf_in, vrf_out = self._io()
        proof = IetfProof.prove(sk, vrf_in, vrf_out, self.ad)
        assert proof.to_bytes().hex() == self.IETF_C + self.IETF_S
        pk = Public.from_bytes(self.suite, bytes.fromhex(self.PUBLIC))
        decoded = IetfProof.from_bytes(self.suite, bytes.fromhex(self.IETF_C + self.IETF_S))
        decoded.verify(pk, vrf_in, vrf_out, self.ad)

    def test_pedersen_proof(self):
        sk, vrf_in, vrf_out = self._io()
        proof, blinding = PedersenProof.prove(sk, vrf_in, vrf_out, self.ad)
        assert self.suite.scalar_encode(blinding).hex() == self.BLINDING
        s = self.suite
        assert s.point_encode(proof.pk_com).hex() == self.PK_COM
        assert s.point_encode(proof.r).hex() == self.R
        assert s.point_encode(proof.ok).hex() == self.OK
        assert s.scalar_encode(proof.s).hex() == self.S
        assert s.scalar_encode(proof.sb).hex() == self.SB
        expected = bytes.fromhex(self.PK_COM + self.R + self.OK + self.S + self.SB)
        assert proof.to_bytes() == expected
        PedersenProof.from_bytes(s, expected).verify(vrf_in, vrf_out, self.ad)
