import bcrypt
from werkzeug.security import check_password_hash, generate_password_hash

BCRYPT_PREFIXES = ('$2a$', '$2b$', '$2y$')


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a werkzeug hash or a bcrypt hash from existing accounts."""
    try:
        if password_hash.startswith(BCRYPT_PREFIXES):
            return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
        return check_password_hash(password_hash, password)
    except (AttributeError, TypeError, ValueError):
        # Malformed or placeholder hashes never match.
        return False
