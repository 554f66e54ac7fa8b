from typing import Optional
from app.domain.entities.asked_question import AskedQuestion
from app.domain.entities.user import User
from abc import ABC, abstractmethod


class UserRepoInterface(ABC):
    @abstractmethod
    async def get(self, email: str) -> Optional[User]:
        raise NotImplementedError

    @abstractmethod
    async def add_history(self, email: str, asked_question: AskedQuestion) -> None:
        raise NotImplementedError

    @abstractmethod
    async def update_subscription(self, email: str, topics: list[str]) -> Optional[User]:
        raise NotImplementedError
