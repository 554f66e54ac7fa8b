"""
Pytest Configuration and Fixtures.

This file puts the project on the path and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from app.domain.entities.identity import Identity
from infrastructure.services.markdown_service import MarkdownService
from infrastructure.services.repo_service import RepoService
from fakes import (AUTHOR_EMAIL, INDEX_HTML, LEARNER_EMAIL, MODERATOR_EMAIL, STRIPE_SECRET_ARN,
                   FakeEmailService, FakeIdentityService, FakePaymentService, FakeSecretsService,
                   InMemoryAssetRepo, InMemoryQuestionRepo, InMemoryUserRepo)


@pytest.fixture
def learner():
    return Identity.from_email(LEARNER_EMAIL)


@pytest.fixture
def author():
    return Identity.from_email(AUTHOR_EMAIL)


@pytest.fixture
def moderator():
    return Identity.from_email(MODERATOR_EMAIL)


@pytest.fixture
def rng():
    """Seeded so the random choices are repeatable."""
    return random.Random(42)


@pytest.fixture
def question_repo():
    return InMemoryQuestionRepo()


@pytest.fixture
def user_repo():
    return InMemoryUserRepo()


@pytest.fixture
def email_service():
    return FakeEmailService()


@pytest.fixture
def payment_service():
    return FakePaymentService()


@pytest.fixture
def secrets_service():
    return FakeSecretsService({STRIPE_SECRET_ARN: '{"pub_key": "pk_test", "secret": "sk_test"}'})


@pytest.fixture
def settings(moderator):
    return SimpleNamespace(
        MODERATOR_EMAIL_HASHES=[moderator.email_hash],
        STRIPE_SECRET_ARN=STRIPE_SECRET_ARN,
        FEEDBACK_RECIPIENT="owner@example.com",
        SITE_URL="https://bitesized.info",
    )


@pytest.fixture
def repo_service(question_repo, user_repo, email_service, payment_service, secrets_service, settings,
                 learner, author, moderator, rng):
    identity_service = FakeIdentityService({
        'learner-token': learner,
        'author-token': author,
        'moderator-token': moderator,
    })
    return RepoService(
        question_repo=question_repo,
        user_repo=user_repo,
        asset_repo=InMemoryAssetRepo({'index.html': INDEX_HTML}),
        identity_service=identity_service,
        markdown_service=MarkdownService(),
        payment_service=payment_service,
        email_service=email_service,
        secrets_service=secrets_service,
        config=settings,
        rng=rng,
    )
