import unittest
import tempfile
from pathlib import Path

from edupass.auth import (
    AllowAllVerifier,
    AuthVerifier,
    CallerVerifier,
    CredentialStore,
    DenyAllVerifier,
    hash_token,
)
from edupass.ledger import InvalidArgument, Unauthorized
from edupass.store import get_db_connection


class VerifierTests(unittest.TestCase):
    def test_allow_all(self):
        AllowAllVerifier().require_identity("GANY")

    def test_deny_all(self):
        with self.assertRaises(Unauthorized):
            DenyAllVerifier().require_identity("GANY")

    def test_caller_verifier_accepts_only_proven(self):
        verifier = CallerVerifier(["GSTUDENT"])
        verifier.require_identity("GSTUDENT")
        with self.assertRaises(Unauthorized):
            verifier.require_identity("GSCHOOL")

    def test_verifiers_satisfy_protocol(self):
        for verifier in (AllowAllVerifier(), DenyAllVerifier(), CallerVerifier()):
            self.assertIsInstance(verifier, AuthVerifier)


class CredentialStoreTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "ledger.db"
        self.store = CredentialStore(self.path)

    def tearDown(self):
        self._tmp.cleanup()

    def test_create_and_resolve(self):
        token = self.store.create("GSTUDENT")

        self.assertEqual(len(token), 32)
        self.assertEqual(self.store.resolve(token), "GSTUDENT")
        self.assertIsNone(self.store.resolve("not-a-token"))
        self.assertIsNone(self.store.resolve(None))

    def test_only_hash_is_stored(self):
        token = self.store.create("GSTUDENT")
        with get_db_connection(self.path) as conn:
            row = conn.execute("SELECT token_hash FROM credentials WHERE identity = ?", ("GSTUDENT",)).fetchone()
        self.assertEqual(row["token_hash"], hash_token(token))
        self.assertNotEqual(row["token_hash"], token)

    def test_duplicate_identity_rejected(self):
        self.store.create("GSTUDENT")
        with self.assertRaises(ValueError):
            self.store.create("GSTUDENT")

    def test_blank_identity_rejected(self):
        with self.assertRaises(InvalidArgument):
            self.store.create(" ")

    def test_rotate_invalidates_old_token(self):
        old = self.store.create("GSTUDENT")
        new = self.store.rotate("GSTUDENT")

        self.assertNotEqual(old, new)
        self.assertIsNone(self.store.resolve(old))
        self.assertEqual(self.store.resolve(new), "GSTUDENT")

    def test_rotate_unknown_identity(self):
        with self.assertRaises(LookupError):
            self.store.rotate("GNOBODY")

    def test_revoke(self):
        token = self.store.create("GSTUDENT")
        self.store.revoke("GSTUDENT")

        self.assertIsNone(self.store.resolve(token))
        with self.assertRaises(LookupError):
            self.store.revoke("GSTUDENT")

        [credential] = self.store.list()
        self.assertFalse(credential.active)

    def test_rotate_reactivates_revoked(self):
        self.store.create("GSTUDENT")
        self.store.revoke("GSTUDENT")
        token = self.store.rotate("GSTUDENT")
        self.assertEqual(self.store.resolve(token), "GSTUDENT")
        self.assertTrue(self.store.list()[0].active)

    def test_verifier_for_token(self):
        token = self.store.create("GSTUDENT")

        self.store.verifier_for(token).require_identity("GSTUDENT")
        with self.assertRaises(Unauthorized):
            self.store.verifier_for(token).require_identity("GSCHOOL")
        with self.assertRaises(Unauthorized):
            self.store.verifier_for(None).require_identity("GSTUDENT")

    def test_list_sorted(self):
        self.store.create("GB")
        self.store.create("GA")
        self.assertEqual([c.identity for c in self.store.list()], ["GA", "GB"])


if __name__ == "__main__":
    unittest.main()
