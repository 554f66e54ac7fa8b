from abc import ABC, abstractmethod
from typing import Optional
from app.domain.entities.donation import PaymentProcessorSecrets


class PaymentServiceInterface(ABC):
    @abstractmethod
    async def create_checkout_url(self,
                                  secrets: PaymentProcessorSecrets,
                                  description: str,
                                  qty: int,
                                  cancel_url: str,
                                  success_url: str,
                                  email: Optional[str] = None) -> Optional[str]:
        """
        Creates a product, a price and a checkout session for a single order.

        :param secrets: Keys of the payment processor
        :param description: Product name shown on the checkout page
        :param qty: The initial number of items, adjustable on the checkout page
        :param cancel_url: Fully qualified URL to return to on cancel
        :param success_url: Fully qualified URL to return to on success
        :param email: Optional customer email to prefill
        :return: The URL of the hosted checkout page or None on failure
        """
        pass
