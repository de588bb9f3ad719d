import re

import pytest

from raven.domain.clients.repository import ClientRepository
from raven.domain.clients.service import ClientDirectory
from raven.errors import ConflictError, NotFoundError, ValidationError
from raven.models import Client
from raven.security_utils import generate_referral_code, verify_password

REFERRAL_PATTERN = re.compile(r"^REF-\d{13}[0-9a-z]{4}$")


def test_resolve_or_create_creates_guest_client(db):
    directory = ClientDirectory(db)

    client = directory.resolve_or_create("Ada Lovelace", "ada@example.com")

    assert client.id is not None
    assert client.email == "ada@example.com"
    assert client.password is None
    assert client.role == "CLIENT"
    assert REFERRAL_PATTERN.match(client.referral_code)


def test_resolve_or_create_is_idempotent_by_email(db):
    directory = ClientDirectory(db)

    first = directory.resolve_or_create("Ada Lovelace", "ada@example.com")
    second = directory.resolve_or_create("Someone Else", "ada@example.com", "other-pass")

    assert second.id == first.id
    assert second.name == "Ada Lovelace"
    assert second.password is None
    assert db.query(Client).filter(Client.email == "ada@example.com").count() == 1


def test_email_lookup_is_case_sensitive(db):
    directory = ClientDirectory(db)

    lower = directory.resolve_or_create("Ada", "ada@example.com")
    upper = directory.resolve_or_create("Ada", "Ada@example.com")

    assert lower.id != upper.id


def test_password_is_hashed(db):
    client = ClientDirectory(db).resolve_or_create("Grace", "grace@example.com", "s3cret-pass")

    assert client.password != "s3cret-pass"
    assert verify_password("s3cret-pass", client.password)


def test_referral_codes_are_unique(db):
    directory = ClientDirectory(db)
    codes = {
        directory.resolve_or_create(f"Client {i}", f"client{i}@example.com").referral_code
        for i in range(5)
    }
    assert len(codes) == 5


def test_referral_code_format():
    assert generate_referral_code(1718000000000).startswith("REF-1718000000000")
    assert REFERRAL_PATTERN.match(generate_referral_code())


def test_concurrent_insert_surfaces_as_conflict(db, monkeypatch):
    directory = ClientDirectory(db)
    directory.resolve_or_create("Ada", "ada@example.com")

    # Another request inserted the row between our lookup and insert
    monkeypatch.setattr(ClientRepository, "get_client_by_email", staticmethod(lambda db, email: None))

    with pytest.raises(ConflictError):
        directory.resolve_or_create("Ada", "ada@example.com")

    assert db.query(Client).count() == 1


@pytest.mark.parametrize("email", ["", None, "not-an-email", "ada@", "@example.com"])
def test_invalid_email_rejected(db, email):
    with pytest.raises(ValidationError):
        ClientDirectory(db).resolve_or_create("Ada", email)
    assert db.query(Client).count() == 0


def test_missing_name_rejected(db):
    with pytest.raises(ValidationError):
        ClientDirectory(db).resolve_or_create("  ", "ada@example.com")


def test_add_role_merges_without_duplicates(db):
    directory = ClientDirectory(db)
    client = directory.create_client("Ada", "ada@example.com", roles=["A-TEAM"])

    directory.add_role(client, "MEMBER")
    directory.add_role(client, "MEMBER")

    assert client.role == "A-TEAM,MEMBER"


def test_get_client_missing_raises_not_found(db):
    with pytest.raises(NotFoundError):
        ClientDirectory(db).get_client(999)


def test_check_client_endpoint(api):
    assert api.get("/api/check-client", params={"email": "ada@example.com"}).json() == {
        "exists": False
    }

    api.post(
        "/api/book-appointment",
        json={
            "clientName": "Ada",
            "clientEmail": "ada@example.com",
            "service": "Haircut",
            "appointmentTime": "2099-06-10T09:00:00Z",
        },
    )

    assert api.get("/api/check-client", params={"email": "ada@example.com"}).json() == {
        "exists": True
    }


def test_check_client_requires_email(api):
    response = api.get("/api/check-client", params={"email": " "})

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


def test_get_client_endpoint_hides_password(api, db):
    client = ClientDirectory(db).create_client(
        "Grace", "grace@example.com", "pw-123456", roles=["MEMBER", "ADMIN"]
    )

    body = api.get(f"/api/clients/{client.id}").json()

    assert body["roles"] == ["MEMBER", "ADMIN"]
    assert body["is_profile_public"] is False
    assert "password" not in body
