import logging
import random
from typing import Optional
import base58
from app.domain.entities.asked_question import AnswerKind, AnswerStatus, AskedQuestion
from app.domain.entities.identity import Identity
from app.domain.entities.question import PublishStage, Question
from app.domain.entities.topic import candidate_topics
from app.domain.exceptions import QuestionNotFoundError, RepositoryError
from app.domain.repositories_interfaces.question_repo import QuestionRepoInterface
from app.domain.repositories_interfaces.user_repo import UserRepoInterface


logger = logging.getLogger('use_cases')

# How many questions to read per random query
RANDOM_BATCH_SIZE = 10


def interaction_kind(question: Question, answers: Optional[list[int]]) -> AnswerKind:
    """
    Works out how the learner interacted with the question.

    :param question: The question that was shown or answered
    :param answers: None if the question was only shown, an empty list if it was skipped,
        otherwise the indexes of the selected answers
    :return: AnswerKind for the history record and the stats counter
    """
    if answers is None:
        return AnswerKind.ASKED
    if not answers:
        return AnswerKind.SKIPPED
    if question.is_correct(answers):
        return AnswerKind.CORRECT
    return AnswerKind.INCORRECT


class QuestionUseCases:
    def __init__(self, question_repo: QuestionRepoInterface,
                 user_repo: UserRepoInterface,
                 rng: random.Random = None):
        self.question_repo = question_repo
        self.user_repo = user_repo
        # Seed it in tests to make the choice of topics, qids and directions repeatable
        self.rng = rng or random.Random()

    def _random_qid(self) -> str:
        return base58.b58encode(self.rng.randbytes(16)).decode()

    async def get_random(self, topic: Optional[str], recent_qids: Optional[list[str]] = None) -> Question:
        """
        Picks a semi-random published question from a topic, avoiding recently seen questions if possible.
        It reads a small batch of questions on one side of a random qid and picks the first
        one that was not seen recently. If there is nothing on that side it looks on the other side.
        The second attempt per topic accepts recently seen questions rather than return nothing.

        :param topic: A topic, a dot-separated list of topics, `any` or None for any topic
        :param recent_qids: Question IDs to skip on the first attempt
        :return: Question with stats
        :raises QuestionNotFoundError: If none of the topics has any questions
        """
        recent_qids = recent_qids or []
        logger.info(f"Recent questions: {len(recent_qids)}")

        for topic in candidate_topics(topic, self.rng):
            for attempt in range(2):
                logger.info(f"Get random attempt {attempt} for {topic}")
                random_qid = self._random_qid()
                op = self.rng.choice(['<', '>'])
                # The last attempt ignores recent questions
                exclude = recent_qids if attempt == 0 else []

                question = await self._get_question(topic, random_qid, op, RANDOM_BATCH_SIZE, exclude,
                                                     published_only=True)
                if question:
                    return question

                op = '>' if op == '<' else '<'
                question = await self._get_question(topic, random_qid, op, RANDOM_BATCH_SIZE, exclude,
                                                     published_only=True)
                if question:
                    return question

        logger.info("No questions found")
        raise QuestionNotFoundError("No questions found")

    async def get_exact(self, topic: str, qid: str) -> Question:
        question = await self._get_question(topic, qid, '=', 1, [])
        if not question:
            logger.warning(f"No question found for {topic} / {qid}")
            raise QuestionNotFoundError("Question not found")
        return question

    async def _get_question(self, topic: str, qid: str, op: str, limit: int,
                            exclude: list[str], published_only: bool = False) -> Optional[Question]:
        logger.info(f"Query for {topic} / {qid} / {op}")
        # `<` has to read backwards to get the closest values, not the smallest ones
        items = await self.question_repo.query(topic, op, qid, limit, scan_forward=op != '<')
        items = list(items)
        self.rng.shuffle(items)

        for item in items:
            # A record without qid is corrupted and is reported by decode()
            if item.qid and item.qid in exclude:
                logger.info(f"Skipping recent question {topic} / {item.qid}")
                continue
            if published_only and item.stage != PublishStage.PUBLISHED.value:
                logger.info(f"Skipping unpublished question {topic} / {item.qid}")
                continue
            question = item.decode()
            logger.info(f"Returning {topic} / {item.qid}")
            return question

        logger.warning(f"No items in query response for {topic} / {qid} / {op}")
        return None

    async def save(self, question: Question, identity: Identity) -> Question:
        """
        Saves the question on behalf of its author. Every save sends the question back to draft.

        :param question: A validated question
        :param identity: The caller, who becomes the author of a new question
        :return: The saved question
        :raises QuestionSaveError: If the question belongs to someone else
        """
        question = question.with_author(identity.email_hash).with_updated().with_stage(PublishStage.DRAFT)
        logger.info(f"Saving question {question.topic}/{question.qid}", extra={'user': identity.email})
        await self.question_repo.save(question)
        return question

    async def record_interaction(self, identity: Optional[Identity], question: Question,
                                 answers: Optional[list[int]]) -> None:
        """
        Adds the interaction to the user's history and updates the question stats.
        Authors working on their own questions are not counted. Anonymous answers update
        the stats only. Failures are logged and never raised.

        :param identity: The caller, if known
        :param question: The question that was shown or answered
        :param answers: None if the question was only shown, otherwise the selected answers
        """
        if identity and identity.email_hash == question.author:
            logger.info("User is the author - NOT updating history and stats", extra={'user': identity.email})
            return

        kind = interaction_kind(question, answers)

        if identity:
            asked_question = AskedQuestion(topic=question.topic, qid=question.qid, status=AnswerStatus.now(kind))
            try:
                await self.user_repo.add_history(identity.email, asked_question)
                logger.info("User answers updated", extra={'user': identity.email})
            except RepositoryError as e:
                logger.error(f"Failed to update user answers: {e}", extra={'user': identity.email}, exc_info=True)
        else:
            logger.info("Unregistered user - NOT updating user history")

        if answers is not None:
            try:
                await self.question_repo.increment_stat(question.topic, question.qid, kind)
                logger.info("Question stats updated")
            except RepositoryError as e:
                logger.error(f"Failed to update question stats: {e}", exc_info=True)
