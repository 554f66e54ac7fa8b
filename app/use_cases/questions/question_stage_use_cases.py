import logging
from typing import Optional
from app.domain.entities.identity import Identity
from app.domain.entities.question import PublishStage, Question
from app.domain.exceptions import ForbiddenError, UnauthorizedError
from app.domain.repositories_interfaces.question_repo import QuestionRepoInterface
from app.use_cases.questions.question_use_cases import QuestionUseCases


logger = logging.getLogger('use_cases')


class QuestionStageUseCases:
    def __init__(self, question_repo: QuestionRepoInterface,
                 question_use_cases: QuestionUseCases,
                 moderator_hashes: list[str]):
        self.question_repo = question_repo
        self.question_use_cases = question_use_cases
        self.moderator_hashes = moderator_hashes

    def ensure_moderator(self, identity: Optional[Identity]) -> None:
        if not identity:
            logger.info("Returning Unauthorized")
            raise UnauthorizedError("Unauthorized")
        if identity.email_hash not in self.moderator_hashes:
            logger.info("Not a moderator", extra={'user': identity.email})
            raise ForbiddenError("Forbidden")

    async def change_stage(self, identity: Optional[Identity], topic: str, qid: str,
                           stage: PublishStage) -> Question:
        """
        Publishes a question or sends it back to draft. Only moderators can do that.

        :param identity: The caller
        :param topic: Question's topic
        :param qid: Question's ID
        :param stage: The new stage
        :return: The updated question
        :raises UnauthorizedError: If the caller is unknown
        :raises ForbiddenError: If the caller is not a moderator
        :raises QuestionNotFoundError: If there is no such question
        """
        self.ensure_moderator(identity)
        question = await self.question_use_cases.get_exact(topic, qid)
        question = question.with_stage(stage).with_updated()
        await self.question_repo.update_stage(question)
        logger.info(f"Stage of {topic}/{qid} changed to {stage.value}", extra={'user': identity.email})
        return question
