"""Shared test fixtures for the retrieval package.

Provides:
- Prompt factory and small hand-built corpora
- MockGateway over the built-in corpus
- A fake asyncpg pool for LiveGateway unit tests
- A real PostgreSQL pool for parity tests (TEST_DATABASE_URL)

IMPORTANT: the real-database fixture drops and recreates its own schema.
It only runs when TEST_DATABASE_URL is set and reachable; otherwise the
tests that need it are skipped.
"""

import asyncio
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import asyncpg
import pytest
import pytest_asyncio
from prompthub_contracts import Prompt

from prompthub_retrieval import MOCK_PROMPTS, MockGateway

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL")
TEST_SCHEMA = "prompthub_test"
SCHEMA_PATH = Path(__file__).parent / "schema.sql"

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_prompt(prompt_id: str, **overrides) -> Prompt:
    """Build a prompt with neutral defaults."""
    data = {
        "id": prompt_id,
        "title": f"Prompt {prompt_id}",
        "content": "General nursing prompt.",
        "category": "General",
        "created_at": BASE_TIME,
    }
    data.update(overrides)
    return Prompt(**data)


class FakeAcquire:
    """Async context manager returned by fake_pool.acquire()."""

    def __init__(self, conn):
        self.conn = conn

    async def __aenter__(self):
        return self.conn

    async def __aexit__(self, exc_type, exc, tb):
        return False


def prompt_row(prompt: Prompt, total_count: int = 1) -> dict:
    """Row shaped like LiveGateway's SELECT output."""
    return {
        "id": prompt.id,
        "title": prompt.title,
        "content": prompt.content,
        "category": prompt.category,
        "specialty": prompt.specialty,
        "tags": list(prompt.tags),
        "votes": prompt.vote_count,
        "created_at": prompt.created_at,
        "created_by": prompt.owner_id,
        "is_anonymous": prompt.is_anonymous,
        "has_versions": prompt.has_alternate_versions,
        "total_count": total_count,
    }


@pytest.fixture
def prompt_factory():
    """Factory for prompts with neutral defaults."""
    return make_prompt


@pytest.fixture
def row_factory():
    """Factory for rows shaped like LiveGateway's SELECT output."""
    return prompt_row


@pytest.fixture
def mock_gateway() -> MockGateway:
    """MockGateway over the built-in nine-prompt corpus."""
    return MockGateway()


@pytest.fixture
def corpus_25() -> list[Prompt]:
    """Twenty-five prompts with distinct votes and dates."""
    return [
        make_prompt(
            f"p-{i:02d}",
            vote_count=i,
            created_at=BASE_TIME + timedelta(days=i),
        )
        for i in range(25)
    ]


@pytest.fixture
def fake_conn() -> AsyncMock:
    """asyncpg connection double; set fetch/fetchval return values per test."""
    conn = AsyncMock()
    conn.fetch = AsyncMock(return_value=[])
    conn.fetchval = AsyncMock(return_value=0)
    return conn


@pytest.fixture
def fake_pool(fake_conn) -> MagicMock:
    """asyncpg pool double whose acquire() yields fake_conn."""
    pool = MagicMock()
    pool.acquire = MagicMock(side_effect=lambda: FakeAcquire(fake_conn))
    pool.close = AsyncMock()
    return pool


async def _seed(conn, prompts) -> None:
    await conn.executemany(
        """
        INSERT INTO prompts (
            id, title, content, category, specialty, tags, votes,
            created_by, is_anonymous, has_versions, created_at
        )
        VALUES ($1::uuid, $2, $3, $4, $5, $6, $7, $8::uuid, $9, $10, $11)
        """,
        [
            (
                p.id,
                p.title,
                p.content,
                p.category,
                p.specialty,
                list(p.tags),
                p.vote_count,
                p.owner_id,
                p.is_anonymous,
                p.has_alternate_versions,
                p.created_at,
            )
            for p in prompts
        ],
    )


@pytest_asyncio.fixture(scope="function")
async def live_pool():
    """Pool on an isolated schema seeded with the built-in corpus.

    Skips when TEST_DATABASE_URL is unset or the server is unreachable.
    """
    if not TEST_DATABASE_URL:
        pytest.skip("TEST_DATABASE_URL not set")

    try:
        pool = await asyncpg.create_pool(
            dsn=TEST_DATABASE_URL,
            min_size=1,
            max_size=2,
            timeout=5,
            server_settings={"search_path": TEST_SCHEMA},
        )
    except (OSError, asyncio.TimeoutError, asyncpg.PostgresError) as e:
        pytest.skip(f"PostgreSQL not reachable: {e}")

    async with pool.acquire() as conn:
        await conn.execute(f"DROP SCHEMA IF EXISTS {TEST_SCHEMA} CASCADE")
        await conn.execute(f"CREATE SCHEMA {TEST_SCHEMA}")
        await conn.execute(SCHEMA_PATH.read_text())
        await _seed(conn, MOCK_PROMPTS)

    yield pool

    async with pool.acquire() as conn:
        await conn.execute(f"DROP SCHEMA IF EXISTS {TEST_SCHEMA} CASCADE")
    await pool.close()
