import pytest

from korsvagen_api.core.exceptions import PasswordHashingError
from korsvagen_api.infrastructure.security.password_hasher import PasswordHasher


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


def test_hash_and_verify(hasher):
    hashed = hasher.hash_password("s3cret-pass")

    assert hashed != "s3cret-pass"
    assert hashed.startswith("$2")
    assert hasher.verify_password("s3cret-pass", hashed) is True


def test_wrong_password_is_rejected(hasher):
    hashed = hasher.hash_password("s3cret-pass")

    assert hasher.verify_password("wrongpass", hashed) is False


def test_hashes_are_salted(hasher):
    assert hasher.hash_password("same-password") != hasher.hash_password("same-password")


def test_corrupt_hash_reads_as_wrong_password(hasher):
    assert hasher.verify_password("anything", "not-a-bcrypt-hash") is False
    assert hasher.verify_password("anything", "") is False


def test_default_cost_factor():
    assert PasswordHasher.DEFAULT_ROUNDS == 12
    assert PasswordHasher().hash_password("cost-check").startswith("$2b$12$")


def test_empty_password_cannot_be_hashed(hasher):
    with pytest.raises(PasswordHashingError):
        hasher.hash_password("")
