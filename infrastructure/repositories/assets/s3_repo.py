import logging
import aioboto3
from botocore.exceptions import BotoCoreError, ClientError
from app.domain.exceptions import ExternalServiceError
from app.domain.repositories_interfaces.asset_repo import AssetRepoInterface


logger = logging.getLogger('repositories')


class S3AssetRepo(AssetRepoInterface):
    def __init__(self, bucket_name: str, region_name: str = None, session: aioboto3.Session = None):
        self.s3_session = session or aioboto3.Session()
        self.bucket_name = bucket_name
        self.region_name = region_name

    async def get(self, key: str) -> str:
        try:
            async with self.s3_session.client('s3', region_name=self.region_name) as s3_client:
                response = await s3_client.get_object(Bucket=self.bucket_name, Key=key)
                body = await response['Body'].read()
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to get {key} from S3: {e}")
            raise ExternalServiceError(f"Failed to get {key} from S3")

        try:
            return body.decode('utf-8')
        except UnicodeDecodeError as e:
            logger.error(f"Failed to convert {key} bytes into a UTF-8 string: {e}")
            raise ExternalServiceError(f"{key} has invalid UTF-8")
