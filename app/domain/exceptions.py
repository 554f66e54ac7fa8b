"""
Errors raised by the use cases and the infrastructure adapters.

Each error carries the HTTP status the presentation layer answers with,
so handlers never need to know which layer failed.
"""


class BitesizedError(Exception):
    status_code = 500

    def __init__(self, message: str = None):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


# 400: malformed or missing request input
class InvalidRequestError(BitesizedError):
    status_code = 400


class InvalidQuestionError(InvalidRequestError):
    pass


class InvalidTopicError(InvalidRequestError):
    pass


# 400: the conditional write was refused because the question belongs to someone else
class QuestionSaveError(BitesizedError):
    status_code = 400


class UnauthorizedError(BitesizedError):
    status_code = 401


class ForbiddenError(BitesizedError):
    status_code = 403


class NotFoundError(BitesizedError):
    status_code = 404


class QuestionNotFoundError(NotFoundError):
    pass


class UserNotFoundError(NotFoundError):
    pass


# 500: DynamoDB failed or returned something unexpected
class RepositoryError(BitesizedError):
    status_code = 500


class CorruptedDataError(RepositoryError):
    pass


# 500: Stripe, SES, S3 or Secrets Manager failed
class ExternalServiceError(BitesizedError):
    status_code = 500


class ConfigurationError(BitesizedError):
    status_code = 500
