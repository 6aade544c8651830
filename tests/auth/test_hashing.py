"""Tests for the bcrypt password hasher."""

import pytest

from credstore.auth import PasswordHasher


def test_same_password_and_salt_reproduce_hash(hasher: PasswordHasher) -> None:
    salt = hasher.generate_salt()

    assert hasher.hash_password("abcDE!", salt) == hasher.hash_password("abcDE!", salt)


def test_different_salts_give_different_hashes(hasher: PasswordHasher) -> None:
    first = hasher.hash_password("abcDE!", hasher.generate_salt())
    second = hasher.hash_password("abcDE!", hasher.generate_salt())

    assert first != second


def test_hash_does_not_contain_plaintext(hasher: PasswordHasher) -> None:
    password_hash = hasher.hash_password("abcDE!", hasher.generate_salt())

    assert b"abcDE!" not in password_hash


def test_salt_carries_cost_factor(hasher: PasswordHasher) -> None:
    salt = hasher.generate_salt()

    assert salt.startswith(f"$2b${hasher.rounds:02d}$".encode())


def test_check_password(hasher: PasswordHasher) -> None:
    salt = hasher.generate_salt()
    password_hash = hasher.hash_password("abcDE!", salt)

    assert hasher.check_password("abcDE!", salt, password_hash)
    assert not hasher.check_password("abcDE?", salt, password_hash)
    assert not hasher.check_password("ABCde!", salt, password_hash)


def test_check_password_too_long_is_mismatch(hasher: PasswordHasher) -> None:
    salt = hasher.generate_salt()
    password_hash = hasher.hash_password("abcDE!", salt)

    assert not hasher.check_password("abcDE!" + "x" * 100, salt, password_hash)


def test_hash_password_rejects_overlong_input(hasher: PasswordHasher) -> None:
    with pytest.raises(ValueError, match="longer than"):
        hasher.hash_password("x" * 73, hasher.generate_salt())


def test_dummy_check_never_matches(hasher: PasswordHasher) -> None:
    assert hasher.dummy_check("abcDE!") is False


@pytest.mark.parametrize("rounds", [3, 32, 0, -1])
def test_invalid_rounds_rejected(rounds: int) -> None:
    with pytest.raises(ValueError, match="bcrypt rounds"):
        PasswordHasher(rounds=rounds)


def test_default_rounds() -> None:
    assert PasswordHasher.DEFAULT_ROUNDS == 10  # noqa: PLR2004
    assert PasswordHasher.valid_rounds(PasswordHasher.DEFAULT_ROUNDS)
