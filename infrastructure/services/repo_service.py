import random


# Repository service that contains all repositories, external services and settings the handlers need.
class RepoService:
    def __init__(self, question_repo, user_repo, asset_repo,
                 identity_service, markdown_service, payment_service,
                 email_service, secrets_service, config, rng: random.Random = None):
        self.question_repo = question_repo
        self.user_repo = user_repo
        self.asset_repo = asset_repo
        self.identity_service = identity_service
        self.markdown_service = markdown_service
        self.payment_service = payment_service
        self.email_service = email_service
        self.secrets_service = secrets_service
        self.config = config
        self.rng = rng
