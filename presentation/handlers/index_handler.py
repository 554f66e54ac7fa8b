import logging
from app.use_cases.index.index_use_cases import IndexUseCases
from infrastructure.services.repo_service import RepoService
from presentation.utils import LambdaRequest, error_handler, text_response


logger = logging.getLogger('handlers')


@error_handler
async def index_handler(request: LambdaRequest, repo_service: RepoService, **kwargs):
    logger.info(f"INDEX {request.method} {request.path}")
    index_use_cases = IndexUseCases(repo_service.asset_repo)
    html = await index_use_cases.get_index(request.param('topic'))
    return text_response(html, 200)
