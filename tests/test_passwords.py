import bcrypt

from utils.passwords import hash_password


def test_hash_is_not_plaintext_and_checks():
    hashed = hash_password("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert hashed.startswith("$2")
    assert bcrypt.checkpw(b"s3cret-pass", hashed.encode("utf-8"))
    assert not bcrypt.checkpw(b"wrong", hashed.encode("utf-8"))


def test_long_passwords_are_truncated_consistently():
    hashed = hash_password("x" * 100)
    assert bcrypt.checkpw(b"x" * 72, hashed.encode("utf-8"))
