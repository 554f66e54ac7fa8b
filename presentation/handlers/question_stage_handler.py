import logging
from app.domain.entities.question import PublishStage
from app.domain.exceptions import InvalidRequestError
from app.use_cases.questions.question_stage_use_cases import QuestionStageUseCases
from app.use_cases.questions.question_use_cases import QuestionUseCases
from infrastructure.services.repo_service import RepoService
from presentation.messages import NO_QID_MSG, NO_STAGE_MSG, NO_TOPIC_MSG, UNSUPPORTED_METHOD_MSG
from presentation.utils import LambdaRequest, error_handler, text_response


logger = logging.getLogger('handlers')


@error_handler
async def question_stage_handler(request: LambdaRequest, repo_service: RepoService, **kwargs):
    identity = repo_service.identity_service.get_identity(request.token)
    user = identity.email if identity else None
    logger.info(f"QUESTION STAGE {request.method}", extra={'user': user})

    if request.method != 'GET':
        raise InvalidRequestError(UNSUPPORTED_METHOD_MSG)

    stage_use_cases = QuestionStageUseCases(
        question_repo=repo_service.question_repo,
        question_use_cases=QuestionUseCases(repo_service.question_repo, repo_service.user_repo),
        moderator_hashes=repo_service.config.MODERATOR_EMAIL_HASHES,
    )
    # Check the caller before looking at the params
    stage_use_cases.ensure_moderator(identity)

    topic = request.param('topic')
    if not topic:
        raise InvalidRequestError(NO_TOPIC_MSG)
    qid = request.param('qid')
    if not qid:
        raise InvalidRequestError(NO_QID_MSG)
    try:
        stage = PublishStage.from_str((request.param('stage') or "").lower())
    except ValueError:
        raise InvalidRequestError(NO_STAGE_MSG)

    await stage_use_cases.change_stage(identity, topic.lower(), qid, stage)
    return text_response(None, 204)
