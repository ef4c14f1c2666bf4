"""AI package exports."""

from .ai_client import AIClient, AIResponse, DummyBackend, OpenAICompatibleBackend
from .prompt_builder import PromptAssembler
from .session import AssistantSession, DocumentEditor, DocumentSnapshot, EditPlan
from .snippets import ActiveSnippetSet, Snippet, SnippetTracker

__all__ = [
    "AIClient",
    "AIResponse",
    "ActiveSnippetSet",
    "AssistantSession",
    "DocumentEditor",
    "DocumentSnapshot",
    "DummyBackend",
    "EditPlan",
    "OpenAICompatibleBackend",
    "PromptAssembler",
    "Snippet",
    "SnippetTracker",
]
