import logging
from app.domain.exceptions import InvalidRequestError
from app.use_cases.feedback.feedback_use_cases import FeedbackUseCases
from infrastructure.services.repo_service import RepoService
from presentation.messages import UNSUPPORTED_METHOD_MSG
from presentation.utils import LambdaRequest, error_handler, text_response


logger = logging.getLogger('handlers')


@error_handler
async def feedback_handler(request: LambdaRequest, repo_service: RepoService, **kwargs):
    # Feedback can be anonymous
    identity = repo_service.identity_service.get_identity(request.token)
    user = identity.email if identity else None
    logger.info(f"FEEDBACK {request.method}", extra={'user': user})

    if request.method != 'POST':
        raise InvalidRequestError(UNSUPPORTED_METHOD_MSG)

    feedback_use_cases = FeedbackUseCases(
        email_service=repo_service.email_service,
        recipient=repo_service.config.FEEDBACK_RECIPIENT,
        site_url=repo_service.config.SITE_URL,
    )
    await feedback_use_cases.send_feedback(
        topic=request.query.get('topic'),
        qid=request.query.get('qid'),
        text=request.body,
        identity=identity,
        source_ip=request.source_ip,
    )
    return text_response(None, 204)
