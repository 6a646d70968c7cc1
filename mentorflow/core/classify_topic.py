"""Topic Classification — maps a free-text question to a notebook topic.

Invariants:
    - PURE: no IO, deterministic for a given input
    - Case-insensitive substring containment
    - Rules checked in table order; the first group with any matching keyword wins
    - No match -> Topic.GENERAL

Design Decisions:
    - Ordered tuple table over dict: priority is explicit and cannot be reordered
      by accident (rag > embeddings > transformers > llm)
"""

from mentorflow.core.domain_types import Topic


TOPIC_RULES: tuple[tuple[Topic, tuple[str, ...]], ...] = (
    (Topic.RAG, ("rag", "retrieval")),
    (Topic.EMBEDDINGS, ("embedding", "vector")),
    (Topic.TRANSFORMERS, ("transformer", "attention")),
    (Topic.LLM, ("llm", "language model")),
)


def classify_topic(text: str) -> Topic:
    """Return the first topic whose keyword group occurs in text."""
    lowered = text.lower()
    for topic, keywords in TOPIC_RULES:
        if any(keyword in lowered for keyword in keywords):
            return topic
    return Topic.GENERAL
