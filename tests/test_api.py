"""
HTTP API test suite.

Runs the FastAPI app in-process against a throwaway SQLite database, with
bearer tokens issued by the credential registry.
"""
import pytest
from fastapi.testclient import TestClient

from edupass.api import create_app
from edupass.auth import CredentialStore, DenyAllVerifier
from edupass.ledger import CreditLedger
from edupass.store import MemoryStore, SqliteStore

EXPIRY = 1735689600


@pytest.fixture
def setup(tmp_path, isolated_config):
    path = tmp_path / "ledger.db"
    ledger = CreditLedger(SqliteStore(path), DenyAllVerifier())
    credentials = CredentialStore(path)
    tokens = {identity: credentials.create(identity) for identity in ("GFUNDER", "GSTUDENT", "GSCHOOL")}
    with TestClient(create_app(ledger=ledger, credentials=credentials)) as client:
        yield client, tokens


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def _issue(client, token, amount=1000, issuer="GFUNDER"):
    return client.post(
        "/v1/ledger/issue",
        json={
            "issuer": issuer,
            "beneficiary": "GSTUDENT",
            "amount": amount,
            "purpose": "Tuition",
            "expires_at": EXPIRY,
        },
        headers=_auth(token),
    )


class TestHealth:
    def test_health(self, setup):
        client, _ = setup
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

    def test_ready(self, setup):
        client, _ = setup
        r = client.get("/ready")
        assert r.status_code == 200
        assert r.json()["status"] == "ready"


class TestInitialize:
    def test_first_caller_wins(self, setup):
        client, _ = setup
        r = client.post("/v1/ledger/initialize", json={"admin": "GADMIN"})
        assert r.status_code == 200

        r = client.post("/v1/ledger/initialize", json={"admin": "GOTHER"})
        assert r.status_code == 409
        assert r.json()["error"] == "already_initialized"

        status = client.get("/v1/ledger/status").json()
        assert status == {"initialized": True, "admin": "GADMIN", "total_issued": 0}


class TestDisbursementFlow:
    def test_issue_transfer_burn(self, setup):
        client, tokens = setup
        client.post("/v1/ledger/initialize", json={"admin": "GADMIN"})

        r = _issue(client, tokens["GFUNDER"])
        assert r.status_code == 200
        assert r.json() == {
            "beneficiary": "GSTUDENT",
            "issuer": "GFUNDER",
            "amount": 1000,
            "purpose": "Tuition",
            "expires_at": EXPIRY,
        }

        r = client.post(
            "/v1/ledger/transfer",
            json={"from_account": "GSTUDENT", "to_account": "GSCHOOL", "amount": 500},
            headers=_auth(tokens["GSTUDENT"]),
        )
        assert r.status_code == 200
        assert r.json() == {"from_balance": 500, "to_balance": 500}

        r = client.post(
            "/v1/ledger/burn",
            json={"account": "GSCHOOL", "amount": 500},
            headers=_auth(tokens["GSCHOOL"]),
        )
        assert r.status_code == 200
        assert r.json() == {"account": "GSCHOOL", "balance": 0}

        assert client.get("/v1/ledger/total-issued").json() == {"total_issued": 1000}
        assert client.get("/v1/ledger/balance/GSTUDENT").json() == {"account": "GSTUDENT", "balance": 500}

    def test_allocation_lookup(self, setup):
        client, tokens = setup
        r = client.get("/v1/ledger/allocation/GSTUDENT")
        assert r.json() == {"beneficiary": "GSTUDENT", "allocation": None}

        _issue(client, tokens["GFUNDER"])
        allocation = client.get("/v1/ledger/allocation/GSTUDENT").json()["allocation"]
        assert allocation["issuer"] == "GFUNDER"
        assert allocation["amount"] == 1000

    def test_large_amounts_survive_json(self, setup):
        client, tokens = setup
        big = 2**127 - 1
        assert _issue(client, tokens["GFUNDER"], amount=big).status_code == 200
        assert client.get("/v1/ledger/balance/GSTUDENT").json()["balance"] == big

        r = _issue(client, tokens["GFUNDER"], amount=1)
        assert r.status_code == 422
        assert r.json()["error"] == "overflow"


class TestErrors:
    def test_issue_without_token(self, setup):
        client, _ = setup
        r = client.post(
            "/v1/ledger/issue",
            json={"issuer": "GFUNDER", "beneficiary": "GSTUDENT", "amount": 10, "expires_at": EXPIRY},
        )
        assert r.status_code == 403
        assert r.json()["error"] == "unauthorized"
        assert client.get("/v1/ledger/total-issued").json()["total_issued"] == 0

    def test_issue_as_someone_else(self, setup):
        client, tokens = setup
        r = _issue(client, tokens["GSTUDENT"], issuer="GFUNDER")
        assert r.status_code == 403

    def test_unknown_token(self, setup):
        client, _ = setup
        assert _issue(client, "deadbeef" * 4).status_code == 403

    def test_zero_amount(self, setup):
        client, tokens = setup
        r = _issue(client, tokens["GFUNDER"], amount=0)
        assert r.status_code == 400
        assert r.json()["error"] == "invalid_amount"

    def test_string_amount_rejected_by_schema(self, setup):
        client, tokens = setup
        r = _issue(client, tokens["GFUNDER"], amount="1000")
        assert r.status_code == 422
        assert client.get("/v1/ledger/total-issued").json()["total_issued"] == 0

    def test_insufficient_balance(self, setup):
        client, tokens = setup
        _issue(client, tokens["GFUNDER"])
        r = client.post(
            "/v1/ledger/burn",
            json={"account": "GSTUDENT", "amount": 1500},
            headers=_auth(tokens["GSTUDENT"]),
        )
        assert r.status_code == 402
        assert r.json() == {"error": "insufficient_balance", "detail": "Insufficient balance to burn"}
        assert client.get("/v1/ledger/balance/GSTUDENT").json()["balance"] == 1000

    def test_transfer_requires_sender_token(self, setup):
        client, tokens = setup
        _issue(client, tokens["GFUNDER"])
        r = client.post(
            "/v1/ledger/transfer",
            json={"from_account": "GSTUDENT", "to_account": "GSCHOOL", "amount": 1},
            headers=_auth(tokens["GSCHOOL"]),
        )
        assert r.status_code == 403
        assert client.get("/v1/ledger/balance/GSCHOOL").json()["balance"] == 0


class TestReadiness:
    def test_not_ready_on_broken_invariants(self, tmp_path, isolated_config):
        from edupass.ledger import DataKey

        store = MemoryStore()
        store.set(DataKey.credits("GA"), 5)
        app = create_app(ledger=CreditLedger(store), credentials=CredentialStore(tmp_path / "c.db"))
        with TestClient(app) as client:
            r = client.get("/ready")
        assert r.status_code == 503
        assert r.json()["failed"][0]["check"] == "supply_covers_balances"
