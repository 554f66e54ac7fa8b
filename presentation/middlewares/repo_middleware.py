import logging
from presentation.utils import LambdaRequest


logger = logging.getLogger('handlers')


class RepoMiddleware:
    """Turns a function URL event into a LambdaRequest and passes the repo service to the handler."""

    def __init__(self, repo_service):
        self.repo_service = repo_service

    async def __call__(self, handler, event: dict):
        request = LambdaRequest.from_event(event)
        logger.info(f"{request.method} {request.path}")
        return await handler(request, repo_service=self.repo_service)
