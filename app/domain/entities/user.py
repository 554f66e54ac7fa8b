from datetime import datetime
from typing import Optional
import uuid
import base58
from pydantic import BaseModel
from app.domain.entities.asked_question import AskedQuestion


# The users table has one record per user with this constant sort key
DEFAULT_USER_TABLE_SK_VALUE = "sub"


def generate_unsubscribe_token() -> str:
    # A base58 UUID4 in lower case, regenerated on every subscription update
    return base58.b58encode(uuid.uuid4().bytes).decode().lower()


"""
User Entity:
1. email (str): User's email address in lower case, the partition key. Cannot be None.
2. email_hash (str): Salted hash of the email, the public user ID.
3. topics (list[str]): Subscribed topics. Empty when unsubscribed from all.
4. questions (list[AskedQuestion]): History of interactions with questions.
5. unsubscribe (str): A unique token for unsubscribe links.
6. updated (datetime, Optional): When the subscription was last updated.
"""
class User(BaseModel):
    email: str
    email_hash: str
    topics: list[str] = []
    questions: list[AskedQuestion] = []
    unsubscribe: str = ""
    updated: Optional[datetime] = None

    def to_dict(self) -> dict:
        data = {
            'email': self.email,
            'emailHash': self.email_hash,
            'topics': self.topics,
            'questions': [str(q) for q in self.questions],
            'unsubscribe': self.unsubscribe,
        }
        if self.updated is not None:
            data['updated'] = self.updated.isoformat().replace('+00:00', 'Z')
        return data
