"""API Dependencies — per-request wiring of store, managers and tool registry.

Invariants:
    - One SqlStore per request, bound to the request's AsyncSession
    - Managers receive the store explicitly (no module-level clients)
    - The notebook author is process-wide (one Anthropic HTTP client);
      tests replace it through app.dependency_overrides[get_notebook_author]
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mentorflow.config import get_settings
from mentorflow.infrastructure.anthropic_client import ResilientAnthropicClient
from mentorflow.infrastructure.database import get_db
from mentorflow.infrastructure.sql_store import SqlStore
from mentorflow.services.message_lifecycle import MessageLifecycleManager
from mentorflow.services.notebook_author import (
    AnthropicNotebookAuthor, NotebookAuthor,
)
from mentorflow.services.phase_transition import PhaseTransitionManager
from mentorflow.services.tool_dispatch import create_full_tool_registry
from mentorflow.services.tool_registry import ToolRegistry


def get_store(db: AsyncSession = Depends(get_db)) -> SqlStore:
    return SqlStore(db)


def get_message_lifecycle(
    store: SqlStore = Depends(get_store),
) -> MessageLifecycleManager:
    return MessageLifecycleManager(store)


def get_phase_transition(
    store: SqlStore = Depends(get_store),
) -> PhaseTransitionManager:
    return PhaseTransitionManager(store)


@lru_cache
def get_notebook_author() -> NotebookAuthor:
    settings = get_settings()
    client = ResilientAnthropicClient(
        api_key=settings.anthropic_api_key,
        max_retries=settings.anthropic_max_retries,
        base_delay_ms=settings.anthropic_base_delay_ms,
        max_delay_ms=settings.anthropic_max_delay_ms,
        timeout_seconds=settings.anthropic_timeout_seconds,
    )
    return AnthropicNotebookAuthor(
        client, settings.notebook_model, settings.notebook_max_tokens,
    )


def get_tool_registry(
    store: SqlStore = Depends(get_store),
    author: NotebookAuthor = Depends(get_notebook_author),
) -> ToolRegistry:
    settings = get_settings()
    return create_full_tool_registry(
        store, author, settings.notebook_output_dir, settings.public_base_url,
    )
