import logging
from app.domain.entities.topic import is_valid_topic
from app.domain.exceptions import InvalidRequestError
from app.use_cases.questions.question_list_use_cases import QuestionListUseCases
from infrastructure.services.repo_service import RepoService
from presentation.messages import INVALID_TOPIC_MSG, UNSUPPORTED_METHOD_MSG
from presentation.utils import LambdaRequest, error_handler, json_response


logger = logging.getLogger('handlers')


@error_handler
async def question_list_handler(request: LambdaRequest, repo_service: RepoService, **kwargs):
    identity = repo_service.identity_service.get_identity(request.token)
    user = identity.email if identity else None
    logger.info(f"QUESTION LIST {request.method}", extra={'user': user})

    if request.method != 'GET':
        raise InvalidRequestError(UNSUPPORTED_METHOD_MSG)

    # The topic is optional, but it must be valid if present
    topic = request.param('topic')
    if topic:
        topic = topic.lower()
        if not is_valid_topic(topic):
            logger.info(f"Invalid topic: {topic}", extra={'user': user})
            raise InvalidRequestError(INVALID_TOPIC_MSG)

    list_use_cases = QuestionListUseCases(
        question_repo=repo_service.question_repo,
        user_repo=repo_service.user_repo,
    )
    questions = await list_use_cases.list_questions(topic, identity)
    return json_response([q.to_dict() for q in questions])
