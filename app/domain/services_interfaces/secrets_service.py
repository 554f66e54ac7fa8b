from abc import ABC, abstractmethod
from typing import Optional


class SecretsServiceInterface(ABC):
    @abstractmethod
    async def get_secret_string(self, secret_id: str) -> Optional[str]:
        """
        Reads a secret value stored as a string.

        :param secret_id: ARN or name of the secret
        :return: The secret string or None if it cannot be read
        """
        pass
