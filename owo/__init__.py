"""owo - natural language to shell commands using LLM providers."""

__version__ = "1.1.2"
