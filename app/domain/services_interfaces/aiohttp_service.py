from abc import ABC, abstractmethod


class AiohttpServiceInterface(ABC):
    @abstractmethod
    async def post_form(self, url: str, data: dict, headers: dict = None) -> dict:
        """
        Sends an asynchronous POST request with a form-encoded body.

        :param url: The URL to send the POST request to
        :param data: Form fields, e.g. {'line_items[0][price]': 'price_123'}
        :param headers: Optional dictionary of headers to include in the request
        :return: The response in JSON format as a dictionary
        """
        pass
