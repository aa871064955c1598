"""
PKCE property tests

Any generated pair must satisfy RFC 7636: verifier length 43..128 from the
unreserved alphabet, challenge = base64url(sha256(verifier)) without padding.
"""

import base64
import hashlib
import unittest

from hypothesis import given, settings
from hypothesis import strategies as st

from okta_auth.pkce import VERIFIER_ALPHABET, code_challenge, generate_pkce

verifiers = st.text(alphabet=VERIFIER_ALPHABET, min_size=43, max_size=128)


class TestPKCEProperties(unittest.TestCase):
    @given(length=st.integers(min_value=43, max_value=128))
    @settings(max_examples=100)
    def test_generated_pair_is_well_formed(self, length):
        pkce = generate_pkce(length)

        self.assertEqual(len(pkce.verifier), length)
        self.assertTrue(set(pkce.verifier) <= set(VERIFIER_ALPHABET))
        expected = base64.urlsafe_b64encode(hashlib.sha256(pkce.verifier.encode()).digest()).rstrip(b"=")
        self.assertEqual(pkce.challenge, expected.decode())

    @given(verifier=verifiers)
    @settings(max_examples=100)
    def test_challenge_is_deterministic_and_unpadded(self, verifier):
        challenge = code_challenge(verifier)

        self.assertEqual(challenge, code_challenge(verifier))
        self.assertEqual(len(challenge), 43)
        self.assertNotIn("=", challenge)
        self.assertNotIn("+", challenge)
        self.assertNotIn("/", challenge)

    @given(length=st.one_of(st.integers(max_value=42), st.integers(min_value=129)))
    def test_out_of_range_lengths_rejected(self, length):
        with self.assertRaises(ValueError):
            generate_pkce(length)
