import pytest

from raven.domain.clients.roles import (
    merge_role,
    merge_stored_role,
    parse_roles,
    serialize_roles,
)


def test_merge_adds_missing_role_at_end():
    assert merge_role(["A-TEAM"], "MEMBER") == ["A-TEAM", "MEMBER"]


def test_merge_existing_role_is_noop():
    assert merge_role(["A-TEAM", "MEMBER"], "MEMBER") == ["A-TEAM", "MEMBER"]


def test_merge_is_idempotent():
    once = merge_role(["CLIENT"], "ADMIN")
    assert merge_role(once, "ADMIN") == once


def test_merge_does_not_mutate_input():
    roles = ["CLIENT"]
    merge_role(roles, "MEMBER")
    assert roles == ["CLIENT"]


def test_merge_into_empty():
    assert merge_role([], "MEMBER") == ["MEMBER"]


@pytest.mark.parametrize("bad_role", ["", "   ", "MEMBER,ADMIN"])
def test_merge_rejects_invalid_tags(bad_role):
    with pytest.raises(ValueError):
        merge_role(["CLIENT"], bad_role)


def test_parse_roles_drops_blanks_and_repeats():
    assert parse_roles("A-TEAM, MEMBER,,A-TEAM") == ["A-TEAM", "MEMBER"]
    assert parse_roles(None) == []
    assert parse_roles("") == []


def test_serialize_round_trips_order():
    assert serialize_roles(["MEMBER", "A-TEAM"]) == "MEMBER,A-TEAM"
    assert parse_roles(serialize_roles(["MEMBER", "A-TEAM"])) == ["MEMBER", "A-TEAM"]


def test_merge_stored_role():
    assert merge_stored_role("A-TEAM", "MEMBER") == "A-TEAM,MEMBER"
    assert merge_stored_role("A-TEAM,MEMBER", "MEMBER") == "A-TEAM,MEMBER"
    assert merge_stored_role(None, "MEMBER") == "MEMBER"
