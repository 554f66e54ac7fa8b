import logging
from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel


logger = logging.getLogger('utils')

TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%SZ'
# 2024-01-01T00:00:00Z + one status char
ANSWER_STATUS_LEN = 21


class AnswerKind(str, Enum):
    ASKED = 'a'
    CORRECT = 'c'
    INCORRECT = 'i'
    SKIPPED = 's'


# Names used in the JSON sent to the front-end, e.g. {"correct": "2024-01-01T00:00:00Z"}
ANSWER_KIND_NAMES = {
    AnswerKind.ASKED: 'asked',
    AnswerKind.CORRECT: 'correct',
    AnswerKind.INCORRECT: 'incorrect',
    AnswerKind.SKIPPED: 'skipped',
}


"""
AnswerStatus Entity:
How the question was answered and when.
1. kind (AnswerKind): asked (emailed or shown), correct, incorrect or skipped.
2. timestamp (datetime): UTC time of the interaction with whole seconds.
Stored in DynamoDB as `2024-01-01T00:00:00Zc`. The status goes last so the values sort
chronologically as plain strings.
"""
class AnswerStatus(BaseModel):
    kind: AnswerKind
    timestamp: datetime

    @classmethod
    def now(cls, kind: AnswerKind) -> 'AnswerStatus':
        return cls(kind=kind, timestamp=datetime.now(timezone.utc).replace(microsecond=0))

    @classmethod
    def from_str(cls, value: str) -> 'AnswerStatus':
        """
        Parses a DynamoDB value like `2024-01-01T00:00:00Zc`.

        :param value: The encoded status
        :return: AnswerStatus instance
        :raises ValueError: If the value has the wrong length, timestamp or status char
        """
        if len(value) != ANSWER_STATUS_LEN:
            logger.error(f"Invalid AnswerStatus: {value}")
            raise ValueError(f"Invalid AnswerStatus (len): {value}")
        try:
            timestamp = datetime.strptime(value[:-1], TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
        except ValueError as e:
            logger.error(f"Invalid AnswerStatus: {value}, {e}")
            raise ValueError(f"Invalid AnswerStatus: {value}") from e
        try:
            kind = AnswerKind(value[-1])
        except ValueError as e:
            logger.error(f"Invalid AnswerStatus: {value}")
            raise ValueError(f"Invalid AnswerStatus (match): {value}") from e
        return cls(kind=kind, timestamp=timestamp)

    def is_answered(self) -> bool:
        return self.kind in (AnswerKind.CORRECT, AnswerKind.INCORRECT)

    def to_json(self) -> dict:
        return {ANSWER_KIND_NAMES[self.kind]: self.timestamp.strftime(TIMESTAMP_FORMAT)}

    def __str__(self) -> str:
        return f"{self.timestamp.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)}{self.kind.value}"


"""
AskedQuestion Entity:
One interaction of a user with a question, appended to the user's history set.
1. topic (str): Question's topic, the partition key of the questions table.
2. qid (str): Question's ID, the sort key of the questions table.
3. status (AnswerStatus): What happened and when.
Stored as `aws/3RuWxwkgBgpWk6ZUARaZx6/2024-10-31T08:39:17Zc`.
"""
class AskedQuestion(BaseModel):
    topic: str
    qid: str
    status: AnswerStatus

    @classmethod
    def from_str(cls, value: str) -> 'AskedQuestion':
        parts = value.split('/')
        if len(parts) != 3:
            logger.error(f"Expected 3 parts in AskedQuestion: {value}")
            raise ValueError("Invalid AskedQuestion (part count)")
        return cls(topic=parts[0], qid=parts[1], status=AnswerStatus.from_str(parts[2]))

    def __str__(self) -> str:
        return f"{self.topic}/{self.qid}/{self.status}"


def latest_answer_list(questions: list[AskedQuestion]) -> list[AskedQuestion]:
    """
    Returns a unique list of questions with the latest answer status.
    If the question was answered, the latest answer wins over any later views or skips.
    If the question was never answered, the latest view or skip is returned.

    :param questions: History records in any order, possibly many per qid
    :return: One record per qid, the most recent first
    """
    viewed = {}
    answered = {}

    # DynamoDB appends to the end of the set, but the order is not guaranteed
    questions = sorted(questions, key=lambda q: q.status.timestamp)

    # The first record seen in reverse is the latest one in its bucket
    for question in reversed(questions):
        bucket = answered if question.status.is_answered() else viewed
        if question.qid not in bucket:
            bucket[question.qid] = question

    # Answers replace views
    viewed.update(answered)

    return sorted(viewed.values(), key=lambda q: q.status.timestamp, reverse=True)
