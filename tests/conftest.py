"""Shared test fixtures."""

from __future__ import annotations

import pytest

from doc_chat.config.settings import Settings
from doc_chat.embeddings.hashing_embedder import HashingEmbedder
from doc_chat.models.domain import Document


@pytest.fixture
def settings():
    """Test settings with the offline embedder and no env file."""
    return Settings(
        _env_file=None,
        openai_api_key="test-key",
        google_api_key="test-key",
        embedding_provider="hashing",
        embedding_dimensions=64,
    )


@pytest.fixture
def hashing_embedder():
    return HashingEmbedder(dimensions=64)


@pytest.fixture
def sample_document():
    return Document(
        id="doc-1",
        text=(
            "Vacation requests are submitted through the HR portal. "
            "Managers approve requests within three days.\n\n"
            "Unused vacation days carry over to the next year. "
            "Carry-over is limited to five days."
        ),
        metadata={
            "title": "Vacation Policy",
            "path": "HR > Policies > Vacation Policy",
            "knowledgeBaseId": "kb-hr",
            "spaceKey": "HR",
            "type": "confluence",
        },
    )


@pytest.fixture
def corpus():
    """A small multi-space corpus."""
    return [
        Document(
            id="hr-leave",
            text=(
                "To request vacation, open the HR portal and choose New Leave Request. "
                "Pick the vacation dates and submit the request to your manager. "
                "Your manager approves or rejects the request within three working days."
            ),
            metadata={
                "title": "Leave Procedures",
                "path": "HR > Policies > Leave Procedures",
                "knowledgeBaseId": "kb-hr",
                "spaceKey": "HR",
                "webUrl": "https://wiki.example.com/hr/leave",
            },
        ),
        Document(
            id="eng-deploy",
            text=(
                "Deployments run every Tuesday. The release manager tags the build "
                "and the pipeline promotes it to production after smoke tests."
            ),
            metadata={
                "title": "Deployment Process",
                "path": "Engineering > Operations > Deployment Process",
                "knowledgeBaseId": "kb-eng",
                "spaceKey": "ENG",
            },
        ),
        Document(
            id="eng-meeting",
            text=(
                "Weekly sync notes. Attendees discussed the roadmap and the database "
                "migration. Decision: freeze schema changes until the migration ends."
            ),
            metadata={
                "title": "Weekly Sync 250310",
                "path": "Engineering > Meetings > Weekly Sync 250310",
                "knowledgeBaseId": "kb-eng",
                "spaceKey": "ENG",
            },
        ),
        Document(
            id="fin-expenses",
            text=(
                "Expense reports must include receipts. Finance reimburses approved "
                "expenses with the next payroll run."
            ),
            metadata={
                "title": "Expense Reports",
                "path": "Finance > Expenses",
                "knowledgeBaseId": "kb-fin",
                "spaceKey": "FIN",
            },
        ),
    ]
