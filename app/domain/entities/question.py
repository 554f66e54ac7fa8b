import json
import logging
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
import base58
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel
from app.domain.entities.asked_question import AnswerStatus
from app.domain.entities.topic import TOPICS
from app.domain.exceptions import InvalidQuestionError, InvalidTopicError


logger = logging.getLogger('utils')

# The maximum size of a serialized question in bytes
MAX_QUESTION_LEN = 12_000
# Longer titles are truncated
MAX_TITLE_LEN = 120
# Used when there is no title and it cannot be made from the question
DEFAULT_TITLE = "Untitled"


def generate_random_qid() -> str:
    """
    Generates a random question ID as UUID4 in Base58 encoding,
    e.g. 1D759ksnnlogULbRPng3noG, 2gS2XiBnscLX5dQFDP3kiJo
    """
    return base58.b58encode(uuid.uuid4().bytes).decode()


def validate_qid(qid: Optional[str]) -> bool:
    # A valid qid is a base58-encoded 16-byte UUID
    if not qid:
        return False
    try:
        return len(base58.b58decode(qid)) == 16
    except ValueError:
        return False


class PublishStage(str, Enum):
    DRAFT = 'draft'
    PUBLISHED = 'published'

    @classmethod
    def from_str(cls, value: str) -> 'PublishStage':
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Invalid publish stage: {value}")


class QuestionFormat(str, Enum):
    # As stored, for editing
    MARKDOWN_FULL = 'markdown_full'
    # HTML with explanations and the learner's selection
    HTML_FULL = 'html_full'
    # HTML without explanations or correct flags, for answering
    HTML_SHORT = 'html_short'


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


"""
Answer Entity:
1. a (str): The short answer in Markdown that appears as an option.
2. e (str, Optional): A detailed explanation why the answer is correct or incorrect.
3. c (bool, Optional): Set if the answer is correct. Only present if true.
4. sel (bool, Optional): Set if the learner selected the answer. Only present if true.
"""
class Answer(CamelModel):
    a: str
    e: Optional[str] = None
    c: Optional[bool] = None
    sel: Optional[bool] = None

    def is_correct(self) -> bool:
        return bool(self.c)


"""
Stats Entity:
Counters of learner interactions. They live in separate DynamoDB attributes
and are copied into the question on reads.
"""
class Stats(CamelModel):
    correct: int = 0
    incorrect: int = 0
    skipped: int = 0

    @classmethod
    def from_counters(cls, correct: Optional[str], incorrect: Optional[str], skipped: Optional[str]) -> 'Stats':
        # Counters come from DynamoDB as strings, missing or invalid values become 0
        def to_int(value):
            try:
                return max(int(value), 0)
            except (TypeError, ValueError):
                return 0
        return cls(correct=to_int(correct), incorrect=to_int(incorrect), skipped=to_int(skipped))


"""
ContributorProfile Entity:
1. name (str, Optional): The name of the contributor as entered with the question.
2. url (str, Optional): A link to the contributor's profile, website or project.
3. img_url (str, Optional): A link to the logo or avatar.
4. about (str, Optional): A free text blurb about the contributor.
"""
class ContributorProfile(CamelModel):
    name: Optional[str] = None
    url: Optional[str] = None
    img_url: Optional[str] = None
    about: Optional[str] = None

    def __str__(self) -> str:
        # name / url / img_url / about without blank parts
        parts = [self.name, self.url, self.img_url, self.about]
        return " / ".join(p.strip() for p in parts if p is not None and p.strip())


# Fields omitted from JSON when they have no value
SKIP_IF_NONE = ('author', 'stats', 'contributor', 'refresherLinks')


"""
Question Entity:
1. qid (str): Base58-encoded UUID4, the sort key in DynamoDB.
2. topic (str): One of TOPICS, the partition key in DynamoDB.
3. question (str): The question in Markdown.
4. answers (list[Answer]): The answers in their original order.
5. correct (int): How many answers are correct. Always recalculated from `answers`.
6. author (str, Optional): Hash of the author's email, set server-side.
7. updated (datetime, Optional): When the contents last changed, whole seconds.
8. title (str): One line summary for the list of questions.
9. stage (PublishStage): draft or published. The DynamoDB attribute is the source of truth.
10. stats (Stats, Optional): Set on reads, never trusted from input.
11. contributor (ContributorProfile, Optional): Who paid for or contributed the question.
12. refresher_links (list[str], Optional): Links from the Markdown, built on the fly and never saved.
"""
class Question(CamelModel):
    qid: str = ""
    topic: str
    question: str
    answers: list[Answer]
    correct: int = 0
    author: Optional[str] = None
    updated: Optional[datetime] = None
    title: str = ""
    stage: PublishStage = PublishStage.DRAFT
    stats: Optional[Stats] = None
    contributor: Optional[ContributorProfile] = None
    refresher_links: Optional[list[str]] = None

    @classmethod
    def from_json(cls, value: str) -> 'Question':
        """
        Converts a JSON string into a Question with validation:
        - qid is a valid base58 UUID4 or a new random one is generated
        - topic is one of TOPICS
        - correct is recalculated from the answers
        - title is trimmed and truncated, or made up from the question
        - stats are dropped

        :param value: Question JSON as submitted by the front-end or stored in `details`
        :return: Question instance
        :raises InvalidQuestionError: If the JSON is too large or does not match the model
        :raises InvalidTopicError: If the topic is not supported
        """
        if len(value.encode()) > MAX_QUESTION_LEN:
            logger.error(f"Question is too large: {len(value.encode())}")
            raise InvalidQuestionError(f"Question is too large. {MAX_QUESTION_LEN} bytes allowed")

        try:
            question = cls.model_validate_json(value)
        except ValidationError as e:
            logger.error(f"Cannot deserialize question: {e} from {value}")
            raise InvalidQuestionError("Cannot deserialize question")

        topic = question.topic.strip().lower()
        if topic not in TOPICS:
            logger.error(f"Invalid topic {topic}")
            raise InvalidTopicError("Invalid topic")

        return question.model_copy(update={
            'qid': question.qid if validate_qid(question.qid) else generate_random_qid(),
            'topic': topic,
            'title': question._clean_title(),
            'correct': sum(1 for a in question.answers if a.is_correct()),
            'stats': None,
        })

    def _clean_title(self) -> str:
        title = self.title.strip()
        if title:
            return title[:MAX_TITLE_LEN]
        if len(self.question) > 10:
            title = self.question.strip().replace('\n', ' ').replace('\r', ' ').replace('  ', ' ')
            return title[:MAX_TITLE_LEN]
        return DEFAULT_TITLE

    def to_dict(self) -> dict:
        data = self.model_dump(mode='json', by_alias=True)
        for field in SKIP_IF_NONE:
            if data.get(field) is None:
                data.pop(field, None)
        for answer in data['answers']:
            for field in ('c', 'sel'):
                if answer.get(field) is None:
                    answer.pop(field, None)
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def is_correct(self, answers: list[int]) -> bool:
        """
        Checks the learner's selection against the correct answers.

        :param answers: Indexes of the selected answers
        :return: True if the number of selected answers matches `correct` and all correct answers are selected
        """
        if self.correct != len(answers):
            return False
        for idx, answer in enumerate(self.answers):
            if answer.is_correct() and idx not in answers:
                return False
        return True

    def is_complete(self) -> bool:
        # All the parts needed to publish the question are present
        return (
            bool(self.topic)
            and len(self.question) > 10
            and len(self.answers) >= 2
            and all(a.a and len(a.e or "") > 10 for a in self.answers)
            and self.correct > 0
            and len(self.title) > 10
        )

    def with_author(self, email_hash: str) -> 'Question':
        return self.model_copy(update={'author': email_hash})

    def with_updated(self) -> 'Question':
        return self.model_copy(update={'updated': datetime.now(timezone.utc).replace(microsecond=0)})

    def with_stats(self, correct: Optional[str], incorrect: Optional[str], skipped: Optional[str]) -> 'Question':
        return self.model_copy(update={'stats': Stats.from_counters(correct, incorrect, skipped)})

    def with_stage(self, stage: PublishStage) -> 'Question':
        return self.model_copy(update={'stage': stage})

    def strip_for_list_display(self) -> 'Question':
        # Keeps IDs, title, stats, stage and the timestamp only
        return Question(
            qid=self.qid,
            topic=self.topic,
            title=self.title,
            stats=self.stats,
            updated=self.updated,
            stage=self.stage,
            question="",
            answers=[],
        )


"""
QuestionWithHistory Entity:
A question for the list of questions, with how the user interacted with it.
1. question (Question): Question stripped for list display.
2. history (list[AnswerStatus], Optional): The latest status, if the user is known.
"""
class QuestionWithHistory(BaseModel):
    question: Question
    history: Optional[list[AnswerStatus]] = None

    def to_dict(self) -> dict:
        data = {'question': self.question.to_dict()}
        if self.history is not None:
            data['history'] = [status.to_json() for status in self.history]
        return data
