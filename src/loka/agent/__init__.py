"""Client for the external chat agent that produces translations."""

from loka.agent.client import ChatAgentClient, ChatMessage, ChatResponse

__all__ = ["ChatAgentClient", "ChatMessage", "ChatResponse"]
