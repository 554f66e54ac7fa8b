from abc import ABC, abstractmethod
from typing import Optional
from app.domain.entities.identity import Identity


class IdentityServiceInterface(ABC):
    @abstractmethod
    def get_identity(self, token: Optional[str]) -> Optional[Identity]:
        """
        Validates a bearer token and extracts the caller's email from it.

        :param token: The raw token from the request header
        :return: Identity with the verified email and its hash, or None if the token is missing,
            invalid, expired or the email is not verified
        """
        pass
