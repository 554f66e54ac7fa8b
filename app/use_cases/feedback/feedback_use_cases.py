import logging
from typing import Optional
from app.domain.entities.identity import Identity
from app.domain.entities.question import validate_qid
from app.domain.entities.topic import into_name
from app.domain.exceptions import InvalidRequestError
from app.domain.services_interfaces.email_service import EmailServiceInterface


logger = logging.getLogger('use_cases')

MIN_FEEDBACK_LEN = 10
MAX_FEEDBACK_LEN = 2_000


class FeedbackUseCases:
    def __init__(self, email_service: EmailServiceInterface, recipient: str, site_url: str):
        self.email_service = email_service
        self.recipient = recipient
        self.site_url = site_url.rstrip('/')

    async def send_feedback(self, topic: Optional[str], qid: Optional[str], text: Optional[str],
                            identity: Optional[Identity] = None, source_ip: Optional[str] = None) -> None:
        """
        Emails feedback about a question to the site owner.

        :param topic: Question's topic, must be one of TOPICS
        :param qid: Question's ID, must be a valid qid
        :param text: Feedback text, 10 to 2000 characters after trimming
        :param identity: The submitter, if logged in
        :param source_ip: The submitter's IP address
        :raises InvalidRequestError: If any of the params is missing or invalid
        """
        if topic is None:
            logger.warning("Missing topic")
            raise InvalidRequestError("Missing topic param")
        topic_name = into_name(topic)
        if not topic_name:
            logger.warning(f"Invalid topic: {topic}")
            raise InvalidRequestError("Invalid topic")

        if qid is None:
            logger.warning("Missing qid")
            raise InvalidRequestError("Missing qid param")
        qid = qid.strip()
        if not validate_qid(qid):
            logger.warning(f"Invalid qid: {qid}")
            raise InvalidRequestError("Invalid qid")

        if text is None:
            logger.warning("Missing feedback text")
            raise InvalidRequestError("Missing feedback text")
        text = text.strip()
        if len(text) < MIN_FEEDBACK_LEN:
            raise InvalidRequestError("Feedback text too short")
        if len(text) > MAX_FEEDBACK_LEN:
            raise InvalidRequestError("Feedback text too long")

        email = identity.email if identity else ""
        source_ip = source_ip or ""
        logger.info(f"Submitter: {email} / {source_ip}")

        subject = f"Feedback for {topic_name}/{qid}"
        question_url = f"{self.site_url}/question?topic={topic}&qid={qid}"
        body = f"{question_url}\n\nSubmitter: {email} / {source_ip}\n\n\n{text}"

        await self.email_service.send_text_email(self.recipient, subject, body)
