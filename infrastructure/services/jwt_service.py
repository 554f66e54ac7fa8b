import json
import logging
from typing import Optional
import jwt
from jwt.algorithms import RSAAlgorithm
from app.domain.entities.identity import Identity
from app.domain.services_interfaces.identity_service import IdentityServiceInterface


logger = logging.getLogger('external_apis')

ALGORITHMS = ["RS256"]


class JwtIdentityService(IdentityServiceInterface):
    def __init__(self, jwk_n: str, jwk_e: str, audience: str):
        # The public key of the identity provider
        self.public_key = RSAAlgorithm.from_jwk(json.dumps({'kty': 'RSA', 'n': jwk_n, 'e': jwk_e}))
        self.audience = audience

    def get_identity(self, token: Optional[str]) -> Optional[Identity]:
        if not token:
            logger.info("No token provided: empty")
            return None

        try:
            claims = jwt.decode(
                token,
                self.public_key,
                algorithms=ALGORITHMS,
                audience=self.audience,
                options={'require': ['exp', 'aud']},
            )
        except jwt.PyJWTError as e:
            logger.info(f"Error decoding token: {e}")
            return None

        email = claims.get('email')
        if not isinstance(email, str) or not email:
            logger.info("No email found in token")
            return None
        if claims.get('email_verified') is not True:
            logger.info(f"Unverified email: {email}")
            return None

        return Identity.from_email(email)
