"""Configuration package."""

from config.settings import settings, Settings, LLMProvider, EvaluatorBackend

__all__ = ["settings", "Settings", "LLMProvider", "EvaluatorBackend"]
