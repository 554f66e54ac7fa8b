from abc import ABC, abstractmethod


class EmailServiceInterface(ABC):
    @abstractmethod
    async def send_text_email(self, to: str, subject: str, body: str) -> None:
        """
        Sends a plain text email. Errors are logged and never raised.

        :param to: Recipient address
        :param subject: Email subject
        :param body: Plain text body
        """
        pass
