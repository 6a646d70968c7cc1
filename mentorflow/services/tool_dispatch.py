"""Tool Dispatch — explicit wiring of every tool definition to its handler.

Invariants:
    - Every tool->handler mapping is visible here — no getattr magic, no auto-discovery
    - Registration order = definition order = list_tools() order
    - Handlers instantiated per registry with their own collaborators

Design Decisions:
    - Explicit list over convention: adding a tool requires editing this file
    - Factory instead of a module-level singleton: the store is per request,
      so the registry is built per request too
"""

from pathlib import Path

from mentorflow.core.repository_protocols import StudentStore
from mentorflow.services.define_memory_tools import (
    TOOLS_MEMORY, GET_STUDENT_MEMORY, SAVE_STUDENT_MEMORY,
)
from mentorflow.services.define_notebook_tools import (
    TOOLS_NOTEBOOK, CREATE_COLAB_NOTEBOOK,
)
from mentorflow.services.define_progress_tools import (
    TOOLS_PROGRESS, GET_STUDENT_PROGRESS, TRANSITION_TO_PHASE2,
)
from mentorflow.services.handle_memory import MemoryHandlers
from mentorflow.services.handle_notebook import NotebookHandlers
from mentorflow.services.handle_progress import ProgressHandlers
from mentorflow.services.notebook_author import NotebookAuthor
from mentorflow.services.phase_transition import PhaseTransitionManager
from mentorflow.services.tool_registry import ToolRegistry, RegisteredTool

ALL_TOOLS: list[dict] = [
    *TOOLS_NOTEBOOK,   # 1 tool
    *TOOLS_MEMORY,     # 2 tools
    *TOOLS_PROGRESS,   # 2 tools
]


def create_full_tool_registry(
    store: StudentStore,
    author: NotebookAuthor,
    notebook_dir: str | Path,
    public_base_url: str,
) -> ToolRegistry:
    """Registry with every tool the agent may call."""
    notebook = NotebookHandlers(author, notebook_dir, public_base_url)
    memory = MemoryHandlers(store)
    progress = ProgressHandlers(store, PhaseTransitionManager(store))

    handlers = {
        CREATE_COLAB_NOTEBOOK: notebook.create_colab_notebook,
        GET_STUDENT_MEMORY: memory.get_student_memory,
        SAVE_STUDENT_MEMORY: memory.save_student_memory,
        GET_STUDENT_PROGRESS: progress.get_student_progress,
        TRANSITION_TO_PHASE2: progress.transition_to_phase2,
    }
    return ToolRegistry(
        RegisteredTool(definition, handlers[definition["name"]])
        for definition in ALL_TOOLS
    )
