import aioboto3


class DynamoDBConfig:
    def __init__(self, region_name: str, session: aioboto3.Session = None):
        self.region_name = region_name
        self.session = session or aioboto3.Session()

    def resource(self):
        # Used as `async with config.resource() as dynamodb`
        return self.session.resource('dynamodb', region_name=self.region_name)
