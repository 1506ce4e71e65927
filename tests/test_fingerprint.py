"""Tests for client fingerprints and password hashing."""
import hashlib

from starlette.requests import Request

from ltc_tracker.security import PasswordHasher, fingerprint, request_fingerprint


class TestFingerprint:
    def test_is_sha256_of_agent_and_address(self):
        expected = hashlib.sha256(b"Mozilla/5.0|10.0.0.1").hexdigest()
        assert fingerprint("Mozilla/5.0", "10.0.0.1") == expected

    def test_is_deterministic(self):
        assert fingerprint("curl/8.0", "127.0.0.1") == fingerprint("curl/8.0", "127.0.0.1")

    def test_differs_by_user_agent(self):
        assert fingerprint("curl/8.0", "127.0.0.1") != fingerprint("curl/8.1", "127.0.0.1")

    def test_differs_by_address(self):
        assert fingerprint("curl/8.0", "127.0.0.1") != fingerprint("curl/8.0", "127.0.0.2")

    def test_missing_parts_are_empty_strings(self):
        """A client without a User-Agent still gets a stable fingerprint."""
        assert fingerprint(None, None) == hashlib.sha256(b"|").hexdigest()


class TestPasswordHasher:
    def test_hash_then_verify(self):
        hasher = PasswordHasher()
        digest = hasher.hash("hunter22")
        assert digest != "hunter22"
        assert hasher.verify("hunter22", digest)

    def test_wrong_password_does_not_verify(self):
        hasher = PasswordHasher()
        assert not hasher.verify("wrong", hasher.hash("hunter22"))

    def test_malformed_digest_does_not_verify(self):
        assert not PasswordHasher().verify("hunter22", "not-a-hash")


class TestRequestFingerprint:
    def test_uses_user_agent_header_and_client_host(self):
        request = Request(
            {
                "type": "http",
                "method": "GET",
                "path": "/",
                "headers": [(b"user-agent", b"Mozilla/5.0")],
                "client": ("10.0.0.1", 51234),
            }
        )
        assert request_fingerprint(request) == fingerprint("Mozilla/5.0", "10.0.0.1")

    def test_request_without_client(self):
        request = Request({"type": "http", "method": "GET", "path": "/", "headers": []})
        assert request_fingerprint(request) == fingerprint(None, "")
