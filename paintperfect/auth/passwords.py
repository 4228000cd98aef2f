# paintperfect/auth/passwords.py
from passlib.context import CryptContext

# pbkdf2 keeps hashing in pure passlib (no native bcrypt backend needed)
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)
