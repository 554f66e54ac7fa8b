import logging
import aioboto3
from botocore.exceptions import BotoCoreError, ClientError
from app.domain.services_interfaces.secrets_service import SecretsServiceInterface


logger = logging.getLogger('external_apis')


class SecretsManagerService(SecretsServiceInterface):
    def __init__(self, region_name: str = None, session: aioboto3.Session = None):
        self.session = session or aioboto3.Session()
        self.region_name = region_name

    async def get_secret_string(self, secret_id):
        try:
            async with self.session.client('secretsmanager', region_name=self.region_name) as client:
                response = await client.get_secret_value(SecretId=secret_id)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to get secret {secret_id}: {e}")
            return None

        secret = response.get('SecretString')
        if not secret:
            logger.error(f"Secret {secret_id} is not a string")
            return None
        return secret
