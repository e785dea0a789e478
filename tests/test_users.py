import pytest

from blogsite.core.errors import DuplicateEmail, InvalidCredentials
from blogsite.services.users import authenticate, create_user, find_user_by_email, find_user_by_id


def test_signup_then_login(db):
    user = create_user(db, "a@x.com", "p1", "1-avatar.png")
    assert authenticate(db, "a@x.com", "p1").id == user.id
    with pytest.raises(InvalidCredentials):
        authenticate(db, "a@x.com", "wrong")


def test_unknown_email_is_invalid_credentials(db):
    with pytest.raises(InvalidCredentials):
        authenticate(db, "nobody@x.com", "p1")


def test_password_is_hashed(db):
    user = create_user(db, "a@x.com", "p1", "1-avatar.png")
    assert user.password_hash != "p1"
    assert user.profile_image == "1-avatar.png"


def test_duplicate_email_is_rejected(db):
    create_user(db, "a@x.com", "p1", "1-avatar.png")
    with pytest.raises(DuplicateEmail):
        create_user(db, "A@X.com", "p2", "2-avatar.png")


def test_lookup_by_email_and_id(db):
    user = create_user(db, "Mixed@Example.com", "p1", "1-avatar.png")
    assert user.email == "mixed@example.com"
    assert find_user_by_email(db, "MIXED@example.com").id == user.id
    assert find_user_by_id(db, user.id).email == "mixed@example.com"
    assert find_user_by_id(db, "missing") is None
    assert find_user_by_email(db, "other@example.com") is None
