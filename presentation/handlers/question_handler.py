import logging
from app.domain.entities.question import Question, QuestionFormat
from app.domain.exceptions import InvalidRequestError, UnauthorizedError
from app.use_cases.questions.question_formatter import QuestionFormatter
from app.use_cases.questions.question_use_cases import QuestionUseCases
from infrastructure.services.repo_service import RepoService
from presentation.messages import NO_BODY_MSG, NO_TOPIC_MSG, UNAUTHORIZED_MSG, UNSUPPORTED_METHOD_MSG
from presentation.utils import RECENT_HEADER_NAME, LambdaRequest, error_handler, json_response, parse_answers


logger = logging.getLogger('handlers')


@error_handler
async def question_handler(request: LambdaRequest, repo_service: RepoService, **kwargs):
    identity = repo_service.identity_service.get_identity(request.token)
    user = identity.email if identity else None
    logger.info(f"QUESTION {request.method}", extra={'user': user})

    question_use_cases = QuestionUseCases(
        question_repo=repo_service.question_repo,
        user_repo=repo_service.user_repo,
        rng=repo_service.rng,
    )
    formatter = QuestionFormatter(repo_service.markdown_service)

    if request.method == 'GET':
        topic = request.param('topic')
        if not topic:
            logger.info(NO_TOPIC_MSG, extra={'user': user})
            raise InvalidRequestError(NO_TOPIC_MSG)
        topic = topic.lower()
        qid = request.param('qid')

        if not qid:
            # Comma-separated qids the front-end showed recently
            recent = [q.strip() for q in request.headers.get(RECENT_HEADER_NAME, "").split(",") if q.strip()]
            question = await question_use_cases.get_random(topic, recent)
            return json_response(formatter.format(question, QuestionFormat.HTML_SHORT).to_dict())

        question = await question_use_cases.get_exact(topic, qid)
        answers = parse_answers(request.query.get('answers'))

        if identity or answers is not None:
            await question_use_cases.record_interaction(identity, question, answers)

        if answers is not None:
            logger.info("Answers found - full HTML", extra={'user': user})
            question_format = QuestionFormat.HTML_FULL
        elif identity and question.author == identity.email_hash:
            logger.info("Author - full markdown", extra={'user': user})
            question_format = QuestionFormat.MARKDOWN_FULL
        else:
            logger.info("No answers - short HTML", extra={'user': user})
            question_format = QuestionFormat.HTML_SHORT
        return json_response(formatter.format(question, question_format, answers).to_dict())

    if request.method == 'PUT':
        if not identity:
            raise UnauthorizedError(UNAUTHORIZED_MSG)
        if not request.body:
            logger.info(NO_BODY_MSG, extra={'user': user})
            raise InvalidRequestError(NO_BODY_MSG)
        question = Question.from_json(request.body)
        question = await question_use_cases.save(question, identity)
        return json_response(question.to_dict())

    logger.info(f"Unsupported method: {request.method}", extra={'user': user})
    raise InvalidRequestError(UNSUPPORTED_METHOD_MSG)
