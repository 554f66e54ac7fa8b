import logging
from typing import Optional
from app.domain.entities.donation import MAX_QTY, UNIT_PRICE_CENTS, PaymentProcessorSecrets
from app.domain.exceptions import ExternalServiceError
from app.domain.services_interfaces.aiohttp_service import AiohttpServiceInterface
from app.domain.services_interfaces.payment_service import PaymentServiceInterface


logger = logging.getLogger('external_apis')


class StripeService(PaymentServiceInterface):
    def __init__(self, aiohttp_service: AiohttpServiceInterface, api_url: str = 'https://api.stripe.com/v1'):
        self.aiohttp_service = aiohttp_service
        self.api_url = api_url.rstrip('/')

    async def _post(self, path: str, data: dict, secrets: PaymentProcessorSecrets) -> dict:
        headers = {'Authorization': f'Bearer {secrets.secret}'}
        return await self.aiohttp_service.post_form(f'{self.api_url}{path}', data=data, headers=headers)

    async def create_checkout_url(self, secrets, description, qty, cancel_url, success_url, email=None):
        try:
            # A new product for every order so the checkout page shows the order description
            product = await self._post('/products', {'name': description}, secrets)
            logger.info(f"Product created: {product.get('id')}")

            price = await self._post('/prices', {
                'currency': 'usd',
                'unit_amount': str(UNIT_PRICE_CENTS),
                'product': product['id'],
            }, secrets)
            logger.info(f"Price created: {price.get('id')}")

            session_params = {
                'mode': 'payment',
                'cancel_url': cancel_url,
                'success_url': success_url,
                'customer_creation': 'if_required',
                'line_items[0][price]': price['id'],
                'line_items[0][quantity]': str(qty),
                'line_items[0][adjustable_quantity][enabled]': 'true',
                'line_items[0][adjustable_quantity][minimum]': '1',
                'line_items[0][adjustable_quantity][maximum]': str(MAX_QTY),
            }
            if email:
                session_params['customer_email'] = email
            session = await self._post('/checkout/sessions', session_params, secrets)
        except (ExternalServiceError, KeyError) as e:
            logger.error(f"Failed to create checkout session: {e}")
            return None

        url: Optional[str] = session.get('url')
        logger.info(f"Checkout session created {session.get('id')}, url: {url}")
        return url
