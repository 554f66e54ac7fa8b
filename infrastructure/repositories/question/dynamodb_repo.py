import logging
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import BotoCoreError, ClientError
from app.domain.entities.asked_question import AnswerKind
from app.domain.entities.question import PublishStage, Question
from app.domain.entities.stored_question import StoredQuestion
from app.domain.exceptions import QuestionSaveError, RepositoryError
from app.domain.repositories_interfaces.question_repo import QuestionRepoInterface
from infrastructure.dynamodb_config import DynamoDBConfig
from infrastructure.repositories import fields


logger = logging.getLogger('repositories')

STAT_FIELDS = {
    AnswerKind.CORRECT: fields.QUESTION_STATS_CORRECT,
    AnswerKind.INCORRECT: fields.QUESTION_STATS_INCORRECT,
    AnswerKind.SKIPPED: fields.QUESTION_STATS_SKIPPED,
}

SAVE_EXPRESSION = ("SET #author = if_not_exists(#author, :author), #updated = :updated, "
                   "#details = :details, #stage = :stage, #title = :title")
# Makes the update fail if the question belongs to someone else
SAVE_CONDITION = "#author = :author OR attribute_not_exists(#author)"


def _str_or_none(value):
    # Numbers come back as Decimal
    return None if value is None else str(value)


def to_stored_question(item: dict) -> StoredQuestion:
    return StoredQuestion(
        topic=str(item.get(fields.TOPIC, "")),
        qid=item.get(fields.QID) if isinstance(item.get(fields.QID), str) else None,
        details=item.get(fields.DETAILS) if isinstance(item.get(fields.DETAILS), str) else None,
        author=_str_or_none(item.get(fields.AUTHOR)),
        stage=_str_or_none(item.get(fields.STAGE)),
        title=_str_or_none(item.get(fields.TITLE)),
        updated=_str_or_none(item.get(fields.UPDATED)),
        stats_correct=_str_or_none(item.get(fields.QUESTION_STATS_CORRECT)),
        stats_incorrect=_str_or_none(item.get(fields.QUESTION_STATS_INCORRECT)),
        stats_skipped=_str_or_none(item.get(fields.QUESTION_STATS_SKIPPED)),
    )


def _details(question: Question) -> str:
    # Stats and links are never persisted inside details
    return question.model_copy(update={'stats': None, 'refresher_links': None}).to_json()


def _updated(question: Question) -> str:
    return question.updated.strftime('%Y-%m-%dT%H:%M:%SZ')


class DynamoDBQuestionRepo(QuestionRepoInterface):
    def __init__(self, config: DynamoDBConfig, table_name: str, topic_index: str, author_index: str):
        self.config = config
        self.table_name = table_name
        self.topic_index = topic_index
        self.author_index = author_index

    async def query(self, topic, op, qid, limit, scan_forward):
        key_condition = Key(fields.TOPIC).eq(topic)
        if op == '<':
            key_condition &= Key(fields.QID).lt(qid)
        elif op == '>':
            key_condition &= Key(fields.QID).gt(qid)
        elif op == '=':
            key_condition &= Key(fields.QID).eq(qid)
        else:
            raise ValueError(f"Unsupported comparison operator: {op}")

        try:
            async with self.config.resource() as dynamodb:
                table = await dynamodb.Table(self.table_name)
                response = await table.query(
                    KeyConditionExpression=key_condition,
                    Limit=limit,
                    ScanIndexForward=scan_forward,
                )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Query for {topic} / {qid} / {op} failed: {e}")
            raise RepositoryError("DDB error")

        return [to_stored_question(item) for item in response.get('Items', [])]

    async def save(self, question):
        if not question.author or not question.updated:
            logger.error(f"Missing author or updated field for {question.topic}/{question.qid}. It's a bug.")
            raise RepositoryError("Failed to save question")

        try:
            async with self.config.resource() as dynamodb:
                table = await dynamodb.Table(self.table_name)
                await table.update_item(
                    Key={fields.TOPIC: question.topic, fields.QID: question.qid},
                    UpdateExpression=SAVE_EXPRESSION,
                    ConditionExpression=SAVE_CONDITION,
                    ExpressionAttributeNames={
                        '#author': fields.AUTHOR,
                        '#updated': fields.UPDATED,
                        '#details': fields.DETAILS,
                        '#stage': fields.STAGE,
                        '#title': fields.TITLE,
                    },
                    ExpressionAttributeValues={
                        ':author': question.author,
                        ':updated': _updated(question),
                        ':details': _details(question),
                        ':stage': question.stage.value,
                        ':title': question.title,
                    },
                )
        except ClientError as e:
            code = e.response.get('Error', {}).get('Code')
            if code == 'ConditionalCheckFailedException':
                logger.warning(f"Question {question.topic}/{question.qid} belongs to another author")
                raise QuestionSaveError("Failed to save question")
            logger.error(f"Failed to save question {question.topic}/{question.qid}: {e}")
            raise RepositoryError("Failed to save question")
        except BotoCoreError as e:
            logger.error(f"Failed to save question {question.topic}/{question.qid}: {e}")
            raise RepositoryError("Failed to save question")
        logger.info(f"Question {question.topic}/{question.qid} saved in DDB")

    async def update_stage(self, question):
        try:
            async with self.config.resource() as dynamodb:
                table = await dynamodb.Table(self.table_name)
                await table.update_item(
                    Key={fields.TOPIC: question.topic, fields.QID: question.qid},
                    UpdateExpression="SET #details = :details, #stage = :stage, #updated = :updated",
                    ConditionExpression="attribute_exists(#qid)",
                    ExpressionAttributeNames={
                        '#details': fields.DETAILS,
                        '#stage': fields.STAGE,
                        '#updated': fields.UPDATED,
                        '#qid': fields.QID,
                    },
                    ExpressionAttributeValues={
                        ':details': _details(question),
                        ':stage': question.stage.value,
                        ':updated': _updated(question),
                    },
                )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to update stage of {question.topic}/{question.qid}: {e}")
            raise RepositoryError("Failed to update question stage")
        logger.info(f"Question {question.topic}/{question.qid} is now {question.stage.value}")

    async def increment_stat(self, topic, qid, kind):
        if kind not in STAT_FIELDS:
            logger.info(f"No counter for {kind.name}")
            return
        try:
            async with self.config.resource() as dynamodb:
                table = await dynamodb.Table(self.table_name)
                await table.update_item(
                    Key={fields.TOPIC: topic, fields.QID: qid},
                    UpdateExpression="ADD #field :v",
                    ExpressionAttributeNames={'#field': STAT_FIELDS[kind]},
                    ExpressionAttributeValues={':v': 1},
                )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to update question stats for {topic}/{qid}: {e}")
            raise RepositoryError("Failed to update question stats")

    async def get_published_by_topic(self, topic):
        logger.info(f"Getting published questions for {topic}")
        return await self._query_index(
            index_name=self.topic_index,
            key_condition=Key(fields.TOPIC).eq(topic),
            filter_expression=Attr(fields.STAGE).eq(PublishStage.PUBLISHED.value),
        )

    async def get_by_author(self, author):
        logger.info(f"Getting questions by author {author}")
        return await self._query_index(
            index_name=self.author_index,
            key_condition=Key(fields.AUTHOR).eq(author),
        )

    async def _query_index(self, index_name, key_condition, filter_expression=None):
        kwargs = {'IndexName': index_name, 'KeyConditionExpression': key_condition}
        if filter_expression is not None:
            kwargs['FilterExpression'] = filter_expression

        items = []
        try:
            async with self.config.resource() as dynamodb:
                table = await dynamodb.Table(self.table_name)
                while True:
                    response = await table.query(**kwargs)
                    items.extend(response.get('Items', []))
                    last_key = response.get('LastEvaluatedKey')
                    if not last_key:
                        break
                    kwargs['ExclusiveStartKey'] = last_key
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Query of {index_name} failed: {e}")
            raise RepositoryError("DDB error")

        return [to_stored_question(item) for item in items]
