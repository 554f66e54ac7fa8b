import logging
from app.domain.exceptions import InvalidRequestError
from app.use_cases.users.user_use_cases import UserUseCases
from infrastructure.services.repo_service import RepoService
from presentation.messages import UNSUPPORTED_METHOD_MSG
from presentation.utils import LambdaRequest, error_handler, json_response, text_response


logger = logging.getLogger('handlers')


@error_handler
async def user_handler(request: LambdaRequest, repo_service: RepoService, **kwargs):
    identity = repo_service.identity_service.get_identity(request.token)
    user = identity.email if identity else None
    logger.info(f"USER {request.method}", extra={'user': user})

    user_use_cases = UserUseCases(repo_service.user_repo)

    if request.method == 'GET':
        topics = request.param('topics')
        if topics is None:
            user_record = await user_use_cases.get(identity)
            return json_response(user_record.to_dict())
        await user_use_cases.update_subscription(identity, topics)
        return text_response(None, 204)

    if request.method == 'DELETE':
        await user_use_cases.unsubscribe(identity)
        return text_response(None, 204)

    raise InvalidRequestError(UNSUPPORTED_METHOD_MSG)
