import asyncio
from config import logging_config  # Importing config to apply it
from config.main_config import Config
from infrastructure.dynamodb_config import DynamoDBConfig
from infrastructure.repositories.assets.s3_repo import S3AssetRepo
from infrastructure.repositories.question.dynamodb_repo import DynamoDBQuestionRepo
from infrastructure.repositories.user.dynamodb_repo import DynamoDBUserRepo
from infrastructure.services.aiohttp_service import AiohttpService
from infrastructure.services.jwt_service import JwtIdentityService
from infrastructure.services.markdown_service import MarkdownService
from infrastructure.services.repo_service import RepoService
from infrastructure.services.secrets_service import SecretsManagerService
from infrastructure.services.ses_email_service import SesEmailService
from infrastructure.services.stripe_service import StripeService
from presentation.handlers.feedback_handler import feedback_handler
from presentation.handlers.index_handler import index_handler
from presentation.handlers.payments_handler import payments_handler
from presentation.handlers.question_handler import question_handler
from presentation.handlers.question_list_handler import question_list_handler
from presentation.handlers.question_stage_handler import question_stage_handler
from presentation.handlers.user_handler import user_handler
from presentation.middlewares.repo_middleware import RepoMiddleware


def create_repo_service() -> RepoService:
    # Creating repo instances and passing them to service for middleware utilization
    dynamodb_config = DynamoDBConfig(region_name=Config.AWS_REGION)
    question_repo = DynamoDBQuestionRepo(
        dynamodb_config,
        table_name=Config.QUESTIONS_TABLE,
        topic_index=Config.QUESTIONS_TOPIC_INDEX,
        author_index=Config.QUESTIONS_AUTHOR_INDEX,
    )
    user_repo = DynamoDBUserRepo(dynamodb_config, table_name=Config.USERS_TABLE)
    asset_repo = S3AssetRepo(Config.ASSETS_BUCKET, region_name=Config.AWS_REGION)

    return RepoService(
        question_repo=question_repo,
        user_repo=user_repo,
        asset_repo=asset_repo,
        identity_service=JwtIdentityService(Config.JWK_N, Config.JWK_E, Config.JWT_AUDIENCE),
        markdown_service=MarkdownService(),
        payment_service=StripeService(AiohttpService(), api_url=Config.STRIPE_API_URL),
        email_service=SesEmailService(Config.EMAIL_FROM, region_name=Config.AWS_REGION),
        secrets_service=SecretsManagerService(region_name=Config.AWS_REGION),
        config=Config,
    )


repo_middleware = RepoMiddleware(create_repo_service())


def _run(handler, event):
    return asyncio.run(repo_middleware(handler, event))


# Lambda entry points, one per function
def question_lambda(event, context):
    return _run(question_handler, event)


def question_list_lambda(event, context):
    return _run(question_list_handler, event)


def question_stage_lambda(event, context):
    return _run(question_stage_handler, event)


def user_lambda(event, context):
    return _run(user_handler, event)


def payments_lambda(event, context):
    return _run(payments_handler, event)


def feedback_lambda(event, context):
    return _run(feedback_handler, event)


def index_lambda(event, context):
    return _run(index_handler, event)
