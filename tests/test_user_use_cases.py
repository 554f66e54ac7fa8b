import pytest

from app.domain.exceptions import InvalidRequestError, UnauthorizedError, UserNotFoundError
from app.use_cases.users.user_use_cases import UserUseCases


@pytest.mark.asyncio
async def test_get_requires_identity(user_repo):
    with pytest.raises(UnauthorizedError):
        await UserUseCases(user_repo).get(None)


@pytest.mark.asyncio
async def test_get_missing_user(user_repo, learner):
    with pytest.raises(UserNotFoundError):
        await UserUseCases(user_repo).get(learner)


@pytest.mark.asyncio
async def test_update_subscription_keeps_valid_topics(user_repo, learner):
    cases = UserUseCases(user_repo)

    await cases.update_subscription(learner, "rust.cobol.AWS")
    user = await cases.get(learner)

    assert user.topics == ["aws", "rust"]
    assert user.to_dict()['emailHash'] == learner.email_hash


@pytest.mark.asyncio
async def test_update_subscription_any_topic(user_repo, learner):
    user = await UserUseCases(user_repo).update_subscription(learner, "any")

    assert user.topics == ["aws", "css", "general", "js-ts", "rust"]


@pytest.mark.asyncio
async def test_update_subscription_without_valid_topics(user_repo, learner):
    with pytest.raises(InvalidRequestError):
        await UserUseCases(user_repo).update_subscription(learner, "cobol.fortran")
    with pytest.raises(UnauthorizedError):
        await UserUseCases(user_repo).update_subscription(None, "rust")


@pytest.mark.asyncio
async def test_unsubscribe(user_repo, learner):
    cases = UserUseCases(user_repo)
    await cases.update_subscription(learner, "rust")

    user = await cases.unsubscribe(learner)

    assert user.topics == []
