import logging
from app.domain.exceptions import InvalidRequestError
from app.use_cases.payments.payment_use_cases import PaymentUseCases
from infrastructure.services.repo_service import RepoService
from presentation.messages import UNSUPPORTED_METHOD_MSG
from presentation.utils import LambdaRequest, error_handler, text_response


logger = logging.getLogger('handlers')


@error_handler
async def payments_handler(request: LambdaRequest, repo_service: RepoService, **kwargs):
    logger.info(f"PAYMENTS {request.method}")

    if request.method != 'POST':
        raise InvalidRequestError(UNSUPPORTED_METHOD_MSG)

    payment_use_cases = PaymentUseCases(
        secrets_service=repo_service.secrets_service,
        payment_service=repo_service.payment_service,
        secret_arn=repo_service.config.STRIPE_SECRET_ARN,
    )
    url = await payment_use_cases.get_checkout_url(request.body)
    return text_response(url, 200)
