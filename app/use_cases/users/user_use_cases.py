import logging
from typing import Optional
from app.domain.entities.identity import Identity
from app.domain.entities.topic import filter_valid_topics, parse_topic_list
from app.domain.entities.user import User
from app.domain.exceptions import InvalidRequestError, UnauthorizedError, UserNotFoundError
from app.domain.repositories_interfaces.user_repo import UserRepoInterface


logger = logging.getLogger('use_cases')


class UserUseCases:
    def __init__(self, user_repo: UserRepoInterface):
        self.user_repo = user_repo

    @staticmethod
    def _require(identity: Optional[Identity]) -> Identity:
        if not identity:
            logger.info("Returning Unauthorized")
            raise UnauthorizedError("Unauthorized")
        return identity

    async def get(self, identity: Optional[Identity]) -> User:
        identity = self._require(identity)
        user = await self.user_repo.get(identity.email)
        if not user:
            logger.info("No user record", extra={'user': identity.email})
            raise UserNotFoundError("User not found")
        return user

    async def update_subscription(self, identity: Optional[Identity], topics_param: Optional[str]) -> Optional[User]:
        """
        Replaces the list of subscribed topics.

        :param identity: The caller
        :param topics_param: Dot-separated topics from the URL, e.g. `aws.rust`
        :return: The updated user record
        :raises InvalidRequestError: If there are no valid topics in the list
        """
        identity = self._require(identity)
        topics = filter_valid_topics(parse_topic_list(topics_param))
        if not topics:
            logger.info("No valid topics found", extra={'user': identity.email})
            raise InvalidRequestError("No valid topics found")
        logger.info(f"Updating user sub: {topics}", extra={'user': identity.email})
        return await self.user_repo.update_subscription(identity.email, topics)

    async def unsubscribe(self, identity: Optional[Identity]) -> Optional[User]:
        identity = self._require(identity)
        logger.info("Unsubscribing from all topics", extra={'user': identity.email})
        return await self.user_repo.update_subscription(identity.email, [])
