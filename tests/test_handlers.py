import base64
import json

import pytest
from botocore.exceptions import EndpointConnectionError

from app.domain.entities.question import PublishStage
from infrastructure.dynamodb_config import DynamoDBConfig
from infrastructure.repositories.user.dynamodb_repo import DynamoDBUserRepo
from presentation.handlers.feedback_handler import feedback_handler
from presentation.handlers.index_handler import index_handler
from presentation.handlers.payments_handler import payments_handler
from presentation.handlers.question_handler import question_handler
from presentation.handlers.question_list_handler import question_list_handler
from presentation.handlers.question_stage_handler import question_stage_handler
from presentation.handlers.user_handler import user_handler
from presentation.middlewares.repo_middleware import RepoMiddleware
from presentation.utils import LambdaRequest, parse_answers
from fakes import FakeDynamoDBSession, lambda_event, make_question


@pytest.fixture
def call(repo_service):
    middleware = RepoMiddleware(repo_service)

    async def _call(handler, **kwargs):
        return await middleware(handler, lambda_event(**kwargs))
    return _call


def body(response):
    return json.loads(response['body'])


def test_lambda_request_from_event():
    event = lambda_event(method="post", headers={'X-Bitie-Token': "abc"}, query={'topic': " rust "})
    event['body'] = base64.b64encode("Hello".encode()).decode()
    event['isBase64Encoded'] = True

    request = LambdaRequest.from_event(event)

    assert request.method == "POST"
    assert request.token == "abc"
    assert request.param('topic') == "rust"
    assert request.param('qid') is None
    assert request.body == "Hello"
    assert request.source_ip == "203.0.113.7"


def test_parse_answers():
    assert parse_answers(None) is None
    assert parse_answers("") == []
    assert parse_answers("0.2.x") == [0, 2]
    assert parse_answers("1.\u00b2.-1.3") == [1, 3]


@pytest.mark.asyncio
async def test_random_question(call, question_repo):
    question = make_question(stage=PublishStage.PUBLISHED)
    question_repo.add(question)

    response = await call(question_handler, query={'topic': "rust"})

    assert response['statusCode'] == 200
    assert response['headers']['Content-Type'].startswith("application/json")
    data = body(response)
    assert data['qid'] == question.qid
    assert all('e' not in a or a['e'] is None for a in data['answers'])


@pytest.mark.asyncio
async def test_random_question_not_found(call):
    response = await call(question_handler, query={'topic': "rust"})

    assert response['statusCode'] == 404


@pytest.mark.asyncio
async def test_random_question_ignores_drafts(call, question_repo):
    question_repo.add(make_question(stage=PublishStage.DRAFT))

    response = await call(question_handler, query={'topic': "rust"})

    assert response['statusCode'] == 404


@pytest.mark.asyncio
async def test_question_needs_topic(call):
    response = await call(question_handler, query={'qid': make_question().qid})

    assert response['statusCode'] == 400


@pytest.mark.asyncio
async def test_answered_question(call, question_repo, user_repo, learner):
    question = make_question(correct=(1,))
    question_repo.add(question)

    response = await call(question_handler, query={'topic': "rust", 'qid': question.qid, 'answers': "1"},
                          headers={'x-bitie-token': "learner-token"})

    assert response['statusCode'] == 200
    data = body(response)
    assert data['answers'][0]['sel'] is True
    assert data['answers'][0]['e'].startswith("<p>")
    assert user_repo.users[learner.email].questions[0].qid == question.qid
    assert question_repo.items[("rust", question.qid)].stats_correct == "1"


@pytest.mark.asyncio
async def test_answered_question_when_the_user_table_is_unreachable(call, repo_service, question_repo):
    question = make_question(correct=(1,))
    question_repo.add(question)
    error = EndpointConnectionError(endpoint_url="https://dynamodb.us-east-1.amazonaws.com")
    repo_service.user_repo = DynamoDBUserRepo(DynamoDBConfig("us-east-1", session=FakeDynamoDBSession(error=error)),
                                              "users")

    response = await call(question_handler, query={'topic': "rust", 'qid': question.qid, 'answers': "1"},
                          headers={'x-bitie-token': "learner-token"})

    assert response['statusCode'] == 200
    assert body(response)['answers'][0]['sel'] is True
    assert question_repo.items[("rust", question.qid)].stats_correct == "1"


@pytest.mark.asyncio
async def test_answers_that_are_not_numbers_are_dropped(call, question_repo):
    question = make_question()
    question_repo.add(question)

    response = await call(question_handler, query={'topic': "rust", 'qid': question.qid, 'answers': "\u00b2"})

    assert response['statusCode'] == 200
    assert question_repo.items[("rust", question.qid)].stats_skipped == "1"


@pytest.mark.asyncio
async def test_author_gets_markdown(call, question_repo, user_repo, author):
    question = make_question(author=author.email_hash)
    question_repo.add(question)

    response = await call(question_handler, query={'topic': "rust", 'qid': question.qid},
                          headers={'x-bitie-token': "author-token"})

    assert body(response)['question'] == question.question
    assert author.email not in user_repo.users


@pytest.mark.asyncio
async def test_save_question(call, question_repo, author):
    question = make_question()

    response = await call(question_handler, method="PUT", body=question.to_json(),
                          headers={'x-bitie-token': "author-token"})

    assert response['statusCode'] == 200
    assert body(response)['author'] == author.email_hash
    assert question_repo.items[("rust", question.qid)].author == author.email_hash


@pytest.mark.asyncio
async def test_save_question_errors(call, question_repo):
    question = make_question(author="someone-else")
    question_repo.add(question)

    assert (await call(question_handler, method="PUT", body=question.to_json()))['statusCode'] == 401
    assert (await call(question_handler, method="PUT", headers={'x-bitie-token': "author-token"}))[
        'statusCode'] == 400
    assert (await call(question_handler, method="PUT", body="{}", headers={'x-bitie-token': "author-token"}))[
        'statusCode'] == 400
    # Belongs to another author
    assert (await call(question_handler, method="PUT", body=question.to_json(),
                       headers={'x-bitie-token': "author-token"}))['statusCode'] == 400
    assert (await call(question_handler, method="DELETE"))['statusCode'] == 400


@pytest.mark.asyncio
async def test_question_list(call, question_repo):
    question_repo.add(make_question(stage=PublishStage.PUBLISHED))

    response = await call(question_list_handler, query={'topic': "rust"})

    assert response['statusCode'] == 200
    assert len(body(response)) == 1
    assert (await call(question_list_handler, query={'topic': "cobol"}))['statusCode'] == 400
    assert (await call(question_list_handler))['statusCode'] == 400


@pytest.mark.asyncio
async def test_question_stage(call, question_repo):
    question = make_question()
    question_repo.add(question)
    query = {'topic': "rust", 'qid': question.qid, 'stage': "published"}

    assert (await call(question_stage_handler, query=query))['statusCode'] == 401
    assert (await call(question_stage_handler, query=query, headers={'x-bitie-token': "learner-token"}))[
        'statusCode'] == 403

    response = await call(question_stage_handler, query=query, headers={'x-bitie-token': "moderator-token"})

    assert response['statusCode'] == 204
    assert question_repo.items[("rust", question.qid)].stage == "published"


@pytest.mark.asyncio
async def test_question_stage_bad_params(call):
    headers = {'x-bitie-token': "moderator-token"}
    qid = make_question().qid

    assert (await call(question_stage_handler, query={'topic': "rust", 'qid': qid, 'stage': "gone"},
                       headers=headers))['statusCode'] == 400
    assert (await call(question_stage_handler, query={'topic': "rust", 'stage': "draft"},
                       headers=headers))['statusCode'] == 400
    assert (await call(question_stage_handler, query={'topic': "rust", 'qid': qid, 'stage': "draft"},
                       headers=headers))['statusCode'] == 404


@pytest.mark.asyncio
async def test_user_subscription(call, user_repo, learner):
    headers = {'x-bitie-token': "learner-token"}

    assert (await call(user_handler, headers=headers))['statusCode'] == 404
    assert (await call(user_handler, query={'topics': "rust.aws"}, headers=headers))['statusCode'] == 204

    response = await call(user_handler, headers=headers)
    assert body(response)['topics'] == ["aws", "rust"]

    assert (await call(user_handler, method="DELETE", headers=headers))['statusCode'] == 204
    assert user_repo.users[learner.email].topics == []


@pytest.mark.asyncio
async def test_user_errors(call):
    assert (await call(user_handler))['statusCode'] == 401
    assert (await call(user_handler, query={'topics': "cobol"}, headers={'x-bitie-token': "learner-token"}))[
        'statusCode'] == 400
    assert (await call(user_handler, method="PUT", headers={'x-bitie-token': "learner-token"}))[
        'statusCode'] == 400


@pytest.mark.asyncio
async def test_payments(call, payment_service):
    order = json.dumps({'qty': 1, 'cancelUrl': "https://x/cancel", 'successUrl': "https://x/ok"})

    response = await call(payments_handler, method="POST", body=order)

    assert response['statusCode'] == 200
    assert response['body'] == payment_service.url
    assert (await call(payments_handler, method="GET"))['statusCode'] == 400
    assert (await call(payments_handler, method="POST", body="[]"))['statusCode'] == 400


@pytest.mark.asyncio
async def test_feedback(call, email_service):
    qid = make_question().qid

    response = await call(feedback_handler, method="POST", query={'topic': "rust", 'qid': qid},
                          body="The explanation is confusing")

    assert response['statusCode'] == 204
    assert "203.0.113.7" in email_service.sent[0][2]
    assert (await call(feedback_handler, method="POST", query={'topic': "rust", 'qid': qid}, body="short"))[
        'statusCode'] == 400


@pytest.mark.asyncio
async def test_index(call):
    response = await call(index_handler, query={'topic': "css"})

    assert response['statusCode'] == 200
    assert "<title>CSS: something I learned today</title>" in response['body']
    assert response['headers']['Content-Type'].startswith("text/html")


@pytest.mark.asyncio
async def test_unexpected_errors_become_500(call, repo_service):
    repo_service.asset_repo = None

    response = await call(index_handler)

    assert response['statusCode'] == 500
