from werkzeug.security import check_password_hash, generate_password_hash


def hash_password(password: str) -> str:
    """
    Hash a plain-text password.

    Werkzeug adds a random salt, so hashing the same password twice gives
    two different strings that both verify.
    """
    return generate_password_hash(password)


def verify_password(password: str, stored_hash: str) -> bool:
    """
    Check a candidate password against a stored hash.

    Anything that cannot be verified (unknown method, garbled hash, wrong
    types) counts as a mismatch.
    """
    if not isinstance(password, str) or not isinstance(stored_hash, str):
        return False
    try:
        return check_password_hash(stored_hash, password)
    except (TypeError, ValueError):
        return False
