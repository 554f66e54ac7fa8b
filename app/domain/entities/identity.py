import hashlib
from pydantic import BaseModel


# Existing author and user records depend on this value, it must never change
PUBLIC_SALT = "bite-sized"


def hash_email(email: str) -> str:
    """
    Returns a salted SHA-256 of the email in hex, e.g.
    0e3bf888c95b085a7172b2e819692bb5b46c26ad067f9405c8ba1dd950732b65

    The front-end can calculate the same value without a request to the server.

    :param email: The email address, normalized to lower case before hashing
    :return: Hex-encoded hash
    """
    return hashlib.sha256(f"{PUBLIC_SALT}{email.lower()}".encode()).hexdigest()


"""
Identity Entity:
An authenticated caller, derived from a verified token and never stored.
1. email (str): Verified email in lower case.
2. email_hash (str): Public pseudonymous ID of the caller.
"""
class Identity(BaseModel):
    email: str
    email_hash: str

    @classmethod
    def from_email(cls, email: str) -> 'Identity':
        email = email.strip().lower()
        return cls(email=email, email_hash=hash_email(email))
