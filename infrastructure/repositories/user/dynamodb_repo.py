import logging
from datetime import datetime, timezone
from botocore.exceptions import BotoCoreError, ClientError
from boto3.dynamodb.conditions import Key
from app.domain.entities.asked_question import AskedQuestion
from app.domain.entities.identity import hash_email
from app.domain.entities.user import DEFAULT_USER_TABLE_SK_VALUE, User, generate_unsubscribe_token
from app.domain.exceptions import RepositoryError
from app.domain.repositories_interfaces.user_repo import UserRepoInterface
from infrastructure.dynamodb_config import DynamoDBConfig
from infrastructure.repositories import fields


logger = logging.getLogger('repositories')


def to_user(item: dict, email: str) -> User:
    """
    Converts a record of the users table into a User.
    History values that cannot be parsed are logged and skipped.

    :param item: DynamoDB item
    :param email: The partition key the item was read with
    :return: User instance
    :raises RepositoryError: If the updated attribute is invalid
    """
    unsubscribe = item.get(fields.UNSUBSCRIBE)
    topics = item.get(fields.TOPICS)

    updated = item.get(fields.UPDATED)
    if isinstance(updated, str):
        try:
            updated = datetime.fromisoformat(updated)
        except ValueError as e:
            logger.warning(f"Invalid updated field: {updated}, {e}", extra={'user': email})
            raise RepositoryError("Invalid user in DDB")
    else:
        updated = None

    questions = []
    for value in item.get(fields.QUESTIONS) or []:
        try:
            questions.append(AskedQuestion.from_str(value))
        except ValueError:
            logger.warning(f"Cannot parse question history value: {value}", extra={'user': email})
    logger.info(f"Found history records in DDB: {len(questions)}", extra={'user': email})

    return User(
        email=email,
        email_hash=hash_email(email),
        topics=sorted(topics) if isinstance(topics, (set, list)) else [],
        questions=questions,
        unsubscribe=unsubscribe if isinstance(unsubscribe, str) else "",
        updated=updated,
    )


class DynamoDBUserRepo(UserRepoInterface):
    def __init__(self, config: DynamoDBConfig, table_name: str):
        self.config = config
        self.table_name = table_name

    def _key(self, email: str) -> dict:
        return {fields.EMAIL: email, fields.SORT_KEY: DEFAULT_USER_TABLE_SK_VALUE}

    async def get(self, email):
        logger.info("Getting user", extra={'user': email})
        try:
            async with self.config.resource() as dynamodb:
                table = await dynamodb.Table(self.table_name)
                response = await table.query(
                    KeyConditionExpression=Key(fields.EMAIL).eq(email) & Key(fields.SORT_KEY).eq(
                        DEFAULT_USER_TABLE_SK_VALUE),
                )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Query for user failed: {e}", extra={'user': email})
            raise RepositoryError("DDB error")

        items = response.get('Items', [])
        if not items:
            logger.warning("No record for the user", extra={'user': email})
            return None
        if len(items) > 1:
            logger.warning("Found multiple records. Returning one only.", extra={'user': email})
        return to_user(items[0], email)

    async def add_history(self, email, asked_question):
        try:
            async with self.config.resource() as dynamodb:
                table = await dynamodb.Table(self.table_name)
                await table.update_item(
                    Key=self._key(email),
                    UpdateExpression="ADD #questions :questions",
                    ExpressionAttributeNames={'#questions': fields.QUESTIONS},
                    ExpressionAttributeValues={':questions': {str(asked_question)}},
                )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to update user answers: {e}", extra={'user': email})
            raise RepositoryError("Failed to update user answers")

    async def update_subscription(self, email, topics):
        logger.info("Updating user sub", extra={'user': email})
        updated = datetime.now(timezone.utc).replace(microsecond=0).strftime('%Y-%m-%dT%H:%M:%SZ')
        try:
            async with self.config.resource() as dynamodb:
                table = await dynamodb.Table(self.table_name)
                response = await table.update_item(
                    Key=self._key(email),
                    UpdateExpression="SET #topics = :topics, #unsubscribe = :unsubscribe, #updated = :updated",
                    ExpressionAttributeNames={
                        '#topics': fields.TOPICS,
                        '#unsubscribe': fields.UNSUBSCRIBE,
                        '#updated': fields.UPDATED,
                    },
                    ExpressionAttributeValues={
                        # An empty String Set is not allowed, NULL means no subscriptions
                        ':topics': set(topics) if topics else None,
                        ':unsubscribe': generate_unsubscribe_token(),
                        ':updated': updated,
                    },
                    ReturnValues='ALL_NEW',
                )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to save user subs: {e}", extra={'user': email})
            raise RepositoryError("Failed to save user subscription")

        attributes = response.get('Attributes')
        return to_user(attributes, email) if attributes else None
