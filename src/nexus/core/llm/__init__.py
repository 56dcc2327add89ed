"""
Completion capability used by document generation.
"""

from nexus.core.llm.client import (
    ChatCompletionClient,
    CompletionClient,
    CompletionError,
)
from nexus.core.llm.retry import RetryPolicy

__all__ = [
    "ChatCompletionClient",
    "CompletionClient",
    "CompletionError",
    "RetryPolicy",
]
