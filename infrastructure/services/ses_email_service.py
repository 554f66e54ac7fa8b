import logging
import aioboto3
from botocore.exceptions import BotoCoreError, ClientError
from app.domain.services_interfaces.email_service import EmailServiceInterface


logger = logging.getLogger('external_apis')

# Subject and body are always in UTF-8
CHARSET = "UTF-8"


class SesEmailService(EmailServiceInterface):
    def __init__(self, from_address: str, region_name: str = None, session: aioboto3.Session = None):
        self.session = session or aioboto3.Session()
        self.from_address = from_address
        self.region_name = region_name

    async def send_text_email(self, to, subject, body):
        logger.info(f"Sending {subject} email to: {to}, body: {body}")
        try:
            async with self.session.client('sesv2', region_name=self.region_name) as ses_client:
                await ses_client.send_email(
                    FromEmailAddress=self.from_address,
                    Destination={'ToAddresses': [to]},
                    Content={
                        'Simple': {
                            'Subject': {'Data': subject, 'Charset': CHARSET},
                            'Body': {'Text': {'Data': body, 'Charset': CHARSET}},
                        }
                    },
                )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Error sending email: {e}")
            return
        logger.info("Email sent")
