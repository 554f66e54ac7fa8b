from typing import Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from app.domain.entities.question import ContributorProfile


# Price of a single question in cents
UNIT_PRICE_CENTS = 5000
MAX_QTY = 10


"""
QuestionDonation Entity:
A payment for one or more questions, as submitted by the front-end.
1. contact_email (str, Optional): Email of the person paying.
2. qty (int): The number of questions to pay for, 1..10.
3. cancel_url (str): Where the checkout page goes on cancel.
4. success_url (str): Where the checkout page goes on success.
5. contributor (ContributorProfile, Optional): Who to credit for the questions.
6. topics (str, Optional): Free text with the preferred topics.
"""
class QuestionDonation(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    contact_email: Optional[str] = None
    qty: int
    cancel_url: str
    success_url: str
    contributor: Optional[ContributorProfile] = None
    topics: Optional[str] = None

    def description(self) -> str:
        # Shown on the checkout page as the product name
        description = "Gift of bite-sized pieces of knowledge"
        topics = (self.topics or "").strip()
        if topics:
            description += f" about {topics}"
        attribution = str(self.contributor) if self.contributor else ""
        if attribution:
            description += f" from {attribution}"
        return description


"""
PaymentProcessorSecrets Entity:
Stripe keys kept in Secrets Manager as `{"pub_key": "pk_live_...", "secret": "sk_live_..."}`.
"""
class PaymentProcessorSecrets(BaseModel):
    pub_key: str
    secret: str
