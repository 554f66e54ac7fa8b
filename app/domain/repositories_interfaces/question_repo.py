from app.domain.entities.asked_question import AnswerKind
from app.domain.entities.question import Question
from app.domain.entities.stored_question import StoredQuestion
from abc import ABC, abstractmethod


class QuestionRepoInterface(ABC):
    @abstractmethod
    async def query(self, topic: str, op: str, qid: str, limit: int, scan_forward: bool) -> list[StoredQuestion]:
        """
        Returns up to `limit` records of the topic where the sort key satisfies `qid <op> :qid`.

        :param topic: The partition key
        :param op: One of `<`, `>`, `=`
        :param qid: The value to compare the sort key with
        :param limit: The maximum number of records to return
        :param scan_forward: False to read the index in descending order
        :return: Records in the order the store returned them
        """
        raise NotImplementedError

    @abstractmethod
    async def save(self, question: Question) -> None:
        """
        Writes the question unless it belongs to a different author.

        :raises QuestionSaveError: If the stored author differs from question.author
        """
        raise NotImplementedError

    @abstractmethod
    async def update_stage(self, question: Question) -> None:
        raise NotImplementedError

    @abstractmethod
    async def increment_stat(self, topic: str, qid: str, kind: AnswerKind) -> None:
        raise NotImplementedError

    @abstractmethod
    async def get_published_by_topic(self, topic: str) -> list[StoredQuestion]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_author(self, author: str) -> list[StoredQuestion]:
        raise NotImplementedError
