import logging
from typing import Optional
from pydantic import ValidationError
from app.domain.entities.donation import MAX_QTY, PaymentProcessorSecrets, QuestionDonation
from app.domain.exceptions import ConfigurationError, ExternalServiceError, InvalidRequestError
from app.domain.services_interfaces.payment_service import PaymentServiceInterface
from app.domain.services_interfaces.secrets_service import SecretsServiceInterface


logger = logging.getLogger('use_cases')

# Stripe replaces the placeholder with the ID of the completed session
SESSION_ID_SUFFIX = "?session_id={CHECKOUT_SESSION_ID}"


class PaymentUseCases:
    def __init__(self, secrets_service: SecretsServiceInterface,
                 payment_service: PaymentServiceInterface,
                 secret_arn: Optional[str]):
        self.secrets_service = secrets_service
        self.payment_service = payment_service
        self.secret_arn = secret_arn

    async def get_secrets(self) -> PaymentProcessorSecrets:
        if not self.secret_arn or not self.secret_arn.strip():
            logger.error("Missing `stripe_secret_arn` env var with the ARN of the secret containing Stripe keys")
            raise ConfigurationError("Failed to get payment processor keys")

        secret = await self.secrets_service.get_secret_string(self.secret_arn.strip())
        if not secret:
            raise ConfigurationError("Failed to get payment processor keys")

        try:
            return PaymentProcessorSecrets.model_validate_json(secret)
        except ValidationError as e:
            logger.error(f"Failed to parse the secret: {e}")
            raise ConfigurationError("Failed to get payment processor keys")

    @staticmethod
    def parse_order(body: Optional[str]) -> QuestionDonation:
        if not body:
            logger.info("Missing HTTP body")
            raise InvalidRequestError("Missing HTTP body")
        try:
            return QuestionDonation.model_validate_json(body)
        except ValidationError as e:
            logger.info(f"Failed to parse the body: {e}")
            raise InvalidRequestError("Failed to parse the body")

    async def get_checkout_url(self, body: Optional[str]) -> str:
        """
        Creates a checkout session for a donation and returns the URL of the checkout page.

        :param body: QuestionDonation as JSON
        :return: The URL of the hosted checkout page
        :raises ConfigurationError: If the payment processor keys are not available
        :raises InvalidRequestError: If the order details are invalid
        :raises ExternalServiceError: If the payment processor did not return a URL
        """
        secrets = await self.get_secrets()
        order = self.parse_order(body)
        logger.info(f"Order details: {order}")

        if not 1 <= order.qty <= MAX_QTY:
            logger.warning(f"Invalid quantity: {order.qty}")
            raise InvalidRequestError("Invalid quantity")

        cancel_url = order.cancel_url.strip()
        if not cancel_url:
            logger.warning("Missing cancel URL in the order details")
            raise InvalidRequestError("Missing cancel URL")

        success_url = order.success_url.strip()
        if not success_url:
            logger.warning("Missing success URL in the order details")
            raise InvalidRequestError("Missing success URL")

        email = (order.contact_email or "").strip().lower() or None

        url = await self.payment_service.create_checkout_url(
            secrets=secrets,
            description=order.description(),
            qty=order.qty,
            cancel_url=cancel_url,
            success_url=success_url + SESSION_ID_SUFFIX,
            email=email,
        )
        if not url:
            logger.info("Failed to get the checkout URL")
            raise ExternalServiceError("Failed to get the checkout URL")
        return url
