import json
from decimal import Decimal

import pytest
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError, EndpointConnectionError, NoCredentialsError

from app.domain.entities.asked_question import AnswerKind, AnswerStatus, AskedQuestion
from app.domain.entities.question import PublishStage
from app.domain.exceptions import QuestionSaveError, RepositoryError
from infrastructure.dynamodb_config import DynamoDBConfig
from infrastructure.repositories.question.dynamodb_repo import DynamoDBQuestionRepo
from infrastructure.repositories.user.dynamodb_repo import DynamoDBUserRepo
from fakes import LEARNER_EMAIL, FakeDynamoDBSession, FakeTable, make_question

QID = "3RuWxwkgBgpWk6ZUARaZx6"
AUTHOR_HASH = "author-hash"
TOPIC_INDEX = "topic-updated-index"
AUTHOR_INDEX = "author-updated-index"

CONNECTION_ERRORS = [
    EndpointConnectionError(endpoint_url="https://dynamodb.us-east-1.amazonaws.com"),
    NoCredentialsError(),
]


def client_error(code, operation="UpdateItem"):
    return ClientError({'Error': {'Code': code, 'Message': "Request failed"}}, operation)


def ddb_question_repo(table=None, error=None):
    config = DynamoDBConfig("us-east-1", session=FakeDynamoDBSession(table, error))
    return DynamoDBQuestionRepo(config, "questions", TOPIC_INDEX, AUTHOR_INDEX)


def ddb_user_repo(table=None, error=None):
    return DynamoDBUserRepo(DynamoDBConfig("us-east-1", session=FakeDynamoDBSession(table, error)), "users")


def question_item(question, **attributes):
    item = {
        'topic': question.topic,
        'qid': question.qid,
        'details': question.to_json(),
        'author': question.author,
        'stage': question.stage.value,
        'title': question.title,
    }
    item.update(attributes)
    return item


def authored_question(**kwargs):
    return make_question(author=AUTHOR_HASH, **kwargs).with_updated()


@pytest.mark.asyncio
async def test_query_reads_closest_smaller_qids():
    question = make_question()
    table = FakeTable([{'Items': [question_item(question, stats_correct=Decimal(2))]}])

    items = await ddb_question_repo(table).query("rust", '<', QID, 10, scan_forward=False)

    assert table.calls == [('query', {
        'KeyConditionExpression': Key('topic').eq("rust") & Key('qid').lt(QID),
        'Limit': 10,
        'ScanIndexForward': False,
    })]
    assert items[0].qid == question.qid
    assert items[0].stats_correct == "2"


@pytest.mark.asyncio
async def test_query_by_exact_qid():
    table = FakeTable()

    items = await ddb_question_repo(table).query("rust", '=', QID, 1, scan_forward=True)

    assert items == []
    assert table.calls[0][1]['KeyConditionExpression'] == Key('topic').eq("rust") & Key('qid').eq(QID)


@pytest.mark.asyncio
async def test_query_with_unknown_operator():
    table = FakeTable()

    with pytest.raises(ValueError):
        await ddb_question_repo(table).query("rust", '!', QID, 1, scan_forward=True)
    assert table.calls == []


@pytest.mark.asyncio
async def test_save_is_conditional_on_the_author():
    question = authored_question()
    table = FakeTable()

    await ddb_question_repo(table).save(question)

    name, request = table.calls[0]
    assert name == 'update_item'
    assert request['Key'] == {'topic': "rust", 'qid': question.qid}
    assert request['UpdateExpression'].startswith("SET #author = if_not_exists(#author, :author)")
    assert request['ConditionExpression'] == "#author = :author OR attribute_not_exists(#author)"
    assert request['ExpressionAttributeNames']['#author'] == "author"
    values = request['ExpressionAttributeValues']
    assert values[':author'] == AUTHOR_HASH
    assert values[':stage'] == "draft"
    assert values[':title'] == question.title
    assert values[':updated'] == question.updated.strftime('%Y-%m-%dT%H:%M:%SZ')
    details = json.loads(values[':details'])
    assert details['qid'] == question.qid
    assert details.get('stats') is None


@pytest.mark.asyncio
async def test_save_refused_for_another_author():
    table = FakeTable(error=client_error('ConditionalCheckFailedException'))

    with pytest.raises(QuestionSaveError):
        await ddb_question_repo(table).save(authored_question())


@pytest.mark.asyncio
async def test_save_other_client_errors():
    table = FakeTable(error=client_error('ProvisionedThroughputExceededException'))

    with pytest.raises(RepositoryError):
        await ddb_question_repo(table).save(authored_question())


@pytest.mark.asyncio
async def test_save_without_author():
    table = FakeTable()

    with pytest.raises(RepositoryError):
        await ddb_question_repo(table).save(make_question().with_updated())
    assert table.calls == []


@pytest.mark.asyncio
async def test_update_stage_needs_an_existing_question():
    question = authored_question().with_stage(PublishStage.PUBLISHED)
    table = FakeTable()

    await ddb_question_repo(table).update_stage(question)

    request = table.calls[0][1]
    assert request['ConditionExpression'] == "attribute_exists(#qid)"
    assert request['ExpressionAttributeNames']['#qid'] == "qid"
    assert request['ExpressionAttributeValues'][':stage'] == "published"


@pytest.mark.asyncio
async def test_update_stage_of_missing_question():
    table = FakeTable(error=client_error('ConditionalCheckFailedException'))

    with pytest.raises(RepositoryError):
        await ddb_question_repo(table).update_stage(authored_question())


@pytest.mark.asyncio
async def test_increment_stat_adds_to_the_counter():
    table = FakeTable()

    await ddb_question_repo(table).increment_stat("rust", QID, AnswerKind.INCORRECT)

    assert table.calls == [('update_item', {
        'Key': {'topic': "rust", 'qid': QID},
        'UpdateExpression': "ADD #field :v",
        'ExpressionAttributeNames': {'#field': "stats_incorrect"},
        'ExpressionAttributeValues': {':v': 1},
    })]


@pytest.mark.asyncio
async def test_increment_stat_ignores_views():
    table = FakeTable()

    await ddb_question_repo(table).increment_stat("rust", QID, AnswerKind.ASKED)

    assert table.calls == []


@pytest.mark.asyncio
async def test_published_questions_are_read_page_by_page():
    first = make_question(stage=PublishStage.PUBLISHED)
    second = make_question(stage=PublishStage.PUBLISHED)
    last_key = {'topic': "rust", 'qid': first.qid}
    table = FakeTable([
        {'Items': [question_item(first)], 'LastEvaluatedKey': last_key},
        {'Items': [question_item(second)]},
    ])

    items = await ddb_question_repo(table).get_published_by_topic("rust")

    assert [item.qid for item in items] == [first.qid, second.qid]
    assert len(table.calls) == 2
    first_request, second_request = table.calls[0][1], table.calls[1][1]
    assert first_request['IndexName'] == TOPIC_INDEX
    assert first_request['KeyConditionExpression'] == Key('topic').eq("rust")
    assert first_request['FilterExpression'] == Attr('stage').eq("published")
    assert 'ExclusiveStartKey' not in first_request
    assert second_request['ExclusiveStartKey'] == last_key


@pytest.mark.asyncio
async def test_questions_by_author():
    table = FakeTable([{'Items': [question_item(authored_question())]}])

    items = await ddb_question_repo(table).get_by_author(AUTHOR_HASH)

    assert items[0].author == AUTHOR_HASH
    request = table.calls[0][1]
    assert request['IndexName'] == AUTHOR_INDEX
    assert request['KeyConditionExpression'] == Key('author').eq(AUTHOR_HASH)
    assert 'FilterExpression' not in request


@pytest.mark.asyncio
@pytest.mark.parametrize('error', CONNECTION_ERRORS)
async def test_question_repo_connection_errors(error):
    repo = ddb_question_repo(error=error)
    question = authored_question()

    with pytest.raises(RepositoryError):
        await repo.query("rust", '>', QID, 10, scan_forward=True)
    with pytest.raises(RepositoryError):
        await repo.save(question)
    with pytest.raises(RepositoryError):
        await repo.update_stage(question)
    with pytest.raises(RepositoryError):
        await repo.increment_stat("rust", QID, AnswerKind.CORRECT)
    with pytest.raises(RepositoryError):
        await repo.get_published_by_topic("rust")


@pytest.mark.asyncio
async def test_get_user():
    table = FakeTable([{'Items': [{'email': LEARNER_EMAIL, 'sk': "sub", 'topics': {"rust"}}]}])

    user = await ddb_user_repo(table).get(LEARNER_EMAIL)

    assert user.topics == ["rust"]
    assert table.calls[0][1]['KeyConditionExpression'] == Key('email').eq(LEARNER_EMAIL) & Key('sk').eq("sub")


@pytest.mark.asyncio
async def test_get_missing_user():
    assert await ddb_user_repo(FakeTable([{'Items': []}])).get(LEARNER_EMAIL) is None


@pytest.mark.asyncio
async def test_add_history_adds_to_the_string_set():
    asked = AskedQuestion(topic="rust", qid=QID, status=AnswerStatus.now(AnswerKind.CORRECT))
    table = FakeTable()

    await ddb_user_repo(table).add_history(LEARNER_EMAIL, asked)

    assert table.calls == [('update_item', {
        'Key': {'email': LEARNER_EMAIL, 'sk': "sub"},
        'UpdateExpression': "ADD #questions :questions",
        'ExpressionAttributeNames': {'#questions': "questions"},
        'ExpressionAttributeValues': {':questions': {str(asked)}},
    })]


@pytest.mark.asyncio
async def test_update_subscription():
    table = FakeTable([{'Attributes': {'email': LEARNER_EMAIL, 'topics': {"rust", "aws"}, 'unsubscribe': "abc"}}])

    user = await ddb_user_repo(table).update_subscription(LEARNER_EMAIL, ["rust", "aws"])

    assert user.topics == ["aws", "rust"]
    request = table.calls[0][1]
    assert request['UpdateExpression'] == "SET #topics = :topics, #unsubscribe = :unsubscribe, #updated = :updated"
    assert request['ExpressionAttributeValues'][':topics'] == {"rust", "aws"}
    assert request['ExpressionAttributeValues'][':unsubscribe']
    assert request['ReturnValues'] == 'ALL_NEW'


@pytest.mark.asyncio
async def test_unsubscribe_sets_topics_to_null():
    table = FakeTable()

    user = await ddb_user_repo(table).update_subscription(LEARNER_EMAIL, [])

    assert user is None
    assert table.calls[0][1]['ExpressionAttributeValues'][':topics'] is None


@pytest.mark.asyncio
@pytest.mark.parametrize('error', CONNECTION_ERRORS + [client_error('ResourceNotFoundException')])
async def test_user_repo_errors(error):
    repo = ddb_user_repo(error=error)
    asked = AskedQuestion(topic="rust", qid=QID, status=AnswerStatus.now(AnswerKind.SKIPPED))

    with pytest.raises(RepositoryError):
        await repo.get(LEARNER_EMAIL)
    with pytest.raises(RepositoryError):
        await repo.add_history(LEARNER_EMAIL, asked)
    with pytest.raises(RepositoryError):
        await repo.update_subscription(LEARNER_EMAIL, ["rust"])
