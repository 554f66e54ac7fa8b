import logging
from typing import Optional
from app.domain.entities.asked_question import latest_answer_list
from app.domain.entities.identity import Identity
from app.domain.entities.question import Question, QuestionWithHistory
from app.domain.entities.stored_question import StoredQuestion
from app.domain.exceptions import CorruptedDataError, InvalidRequestError, RepositoryError
from app.domain.repositories_interfaces.question_repo import QuestionRepoInterface
from app.domain.repositories_interfaces.user_repo import UserRepoInterface


logger = logging.getLogger('use_cases')


class QuestionListUseCases:
    def __init__(self, question_repo: QuestionRepoInterface, user_repo: UserRepoInterface):
        self.question_repo = question_repo
        self.user_repo = user_repo

    async def list_questions(self, topic: Optional[str], identity: Optional[Identity]) -> list[QuestionWithHistory]:
        """
        Returns the list of questions for the topic, the author, or both.
        - topic + user: published questions with the user's latest status for each
        - topic only: published questions
        - user only: all questions by the user as the author

        :param topic: A validated topic or None
        :param identity: The caller, if known
        :return: Questions stripped for list display, the most recently updated first
        :raises InvalidRequestError: If there is neither topic nor user
        """
        if topic:
            questions = self._to_list_items(await self.question_repo.get_published_by_topic(topic))
        elif identity:
            questions = self._to_list_items(await self.question_repo.get_by_author(identity.email_hash))
        else:
            logger.info("No topic or user")
            raise InvalidRequestError("No topic or user")

        if not (topic and identity):
            logger.info(f"Returning list of questions, no history: {len(questions)}")
            return [QuestionWithHistory(question=q) for q in questions]

        history = await self._get_history(topic, identity)
        logger.info(f"Reduced history to one status per question: {len(history)}", extra={'user': identity.email})
        questions_with_history = []
        for question in questions:
            status = history.pop(question.qid, None)
            questions_with_history.append(QuestionWithHistory(
                question=question,
                history=[status] if status else None,
            ))
        logger.info(f"Returning list questions + history: {len(questions_with_history)}")
        return questions_with_history

    @staticmethod
    def _to_list_items(items: list[StoredQuestion]) -> list[Question]:
        questions = []
        for item in items:
            # One bad record should not break the whole list
            try:
                questions.append(item.to_list_item())
            except CorruptedDataError:
                continue
        logger.info(f"Fetched questions: {len(questions)}")
        return sorted(questions, key=lambda q: q.updated, reverse=True)

    async def _get_history(self, topic: str, identity: Identity) -> dict:
        # Missing history only means the list has no statuses
        try:
            user = await self.user_repo.get(identity.email)
        except RepositoryError as e:
            logger.error(f"Cannot get user question history: {e}", extra={'user': identity.email})
            return {}
        if not user:
            logger.warning("No record for the user", extra={'user': identity.email})
            return {}

        topic_history = [q for q in user.questions if q.topic == topic]
        logger.info(f"Remaining after topic filter: {len(topic_history)}", extra={'user': identity.email})
        return {q.qid: q.status for q in latest_answer_list(topic_history)}
