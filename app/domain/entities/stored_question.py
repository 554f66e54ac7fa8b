import logging
from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel
from app.domain.entities.question import DEFAULT_TITLE, PublishStage, Question, Stats
from app.domain.exceptions import CorruptedDataError, InvalidRequestError


logger = logging.getLogger('utils')

# Used instead of missing or invalid `updated` values so such questions go to the end of lists
MIN_UPDATED = datetime.min.replace(tzinfo=timezone.utc)


"""
StoredQuestion Entity:
A question record as it comes from the questions table, before decoding.
1. topic (str): Partition key.
2. qid (str, Optional): Sort key. A record without it is corrupted.
3. details (str, Optional): The full question as JSON.
4. author, stage, title, updated (str, Optional): Top-level attributes used by indexes and lists.
5. stats_correct, stats_incorrect, stats_skipped (str, Optional): Interaction counters.
"""
class StoredQuestion(BaseModel):
    topic: str
    qid: Optional[str] = None
    details: Optional[str] = None
    author: Optional[str] = None
    stage: Optional[str] = None
    title: Optional[str] = None
    updated: Optional[str] = None
    stats_correct: Optional[str] = None
    stats_incorrect: Optional[str] = None
    stats_skipped: Optional[str] = None

    def decode(self) -> Question:
        """
        Converts the record into a full Question with stats attached.
        The stage attribute overrides the stage inside `details`.

        :return: Question instance
        :raises CorruptedDataError: If qid or details are missing or details cannot be parsed
        """
        if not self.qid:
            logger.error(f"Invalid question for {self.topic}: missing qid attribute")
            raise CorruptedDataError("Invalid question: missing qid")
        if not self.details:
            logger.error(f"Invalid question for {self.topic} / {self.qid}: missing details attribute")
            raise CorruptedDataError("Invalid question: missing details")

        try:
            question = Question.from_json(self.details)
        except InvalidRequestError as e:
            logger.error(f"Invalid question for {self.topic} / {self.qid}: {e}")
            raise CorruptedDataError("Invalid question: cannot parse details")

        question = question.with_stats(self.stats_correct, self.stats_incorrect, self.stats_skipped)
        if self.stage:
            try:
                question = question.with_stage(PublishStage.from_str(self.stage))
            except ValueError:
                logger.warning(f"Invalid stage attribute for {self.topic} / {self.qid}: {self.stage}")
        return question

    def to_list_item(self) -> Question:
        """
        Builds a question for the list of questions from the top-level attributes only.
        Missing title or updated values are replaced with defaults and logged.

        :return: Question stripped for list display
        :raises CorruptedDataError: If qid is missing
        """
        if not self.qid:
            logger.warning(f"Invalid question for {self.topic}: missing qid attribute")
            raise CorruptedDataError("Invalid question: missing qid")

        title = self.title
        if not title:
            logger.warning(f"invalid `title` attribute for {self.topic} / {self.qid}")
            title = DEFAULT_TITLE

        try:
            updated = datetime.fromisoformat(self.updated)
            if updated.tzinfo is None:
                updated = updated.replace(tzinfo=timezone.utc)
        except (TypeError, ValueError) as e:
            logger.warning(f"invalid `updated` attribute for {self.topic} / {self.qid}: {e}")
            updated = MIN_UPDATED

        try:
            stage = PublishStage.from_str(self.stage or PublishStage.DRAFT.value)
        except ValueError:
            logger.warning(f"invalid `stage` attribute for {self.topic} / {self.qid}")
            stage = PublishStage.DRAFT

        return Question(
            qid=self.qid,
            topic=self.topic,
            title=title,
            updated=updated,
            stage=stage,
            question="",
            answers=[],
            stats=Stats.from_counters(self.stats_correct, self.stats_incorrect, self.stats_skipped),
        )
