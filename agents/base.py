"""
Tender Evaluation - Base Agent Configuration

LLM abstraction for the CrewAI document evaluator (OpenAI, Anthropic, Gemini).
"""

import json
import os
from typing import Optional
from crewai import LLM

from config.settings import settings, LLMProvider


_PROVIDER_KEYS = {
    LLMProvider.OPENAI: ("openai", "OPENAI_API_KEY", "openai_api_key"),
    LLMProvider.ANTHROPIC: ("anthropic", "ANTHROPIC_API_KEY", "anthropic_api_key"),
    LLMProvider.GEMINI: ("gemini", "GOOGLE_API_KEY", "google_api_key"),
}


def get_llm(
    provider: Optional[LLMProvider] = None,
    model: Optional[str] = None,
    temperature: Optional[float] = None
) -> LLM:
    """
    Get an LLM instance for the specified or configured provider.

    Args:
        provider: Override the configured provider
        model: Override the configured model
        temperature: Override the configured temperature

    Returns:
        Configured LLM instance for CrewAI
    """
    provider = provider or settings.llm_provider
    model = model or settings.default_model
    temperature = temperature if temperature is not None else settings.llm_temperature

    if provider not in _PROVIDER_KEYS:
        raise ValueError(f"Unsupported LLM provider: {provider}")

    prefix, env_var, setting_name = _PROVIDER_KEYS[provider]

    # CrewAI reads provider keys from the environment
    api_key = getattr(settings, setting_name)
    if api_key:
        os.environ[env_var] = api_key

    return LLM(
        model=model if model.startswith(f"{prefix}/") else f"{prefix}/{model}",
        temperature=temperature
    )


# Default LLM instance using configured settings
default_llm = None

def get_default_llm() -> LLM:
    """Get the default LLM instance (lazy initialization)."""
    global default_llm
    if default_llm is None:
        default_llm = get_llm()
    return default_llm


AGENT_VERBOSE = False


def validate_json_output(output: str, required_keys: list[str]) -> dict:
    """
    Validate and parse JSON output from an agent.

    Args:
        output: Raw output string from agent
        required_keys: Keys that must be present in the output

    Returns:
        Parsed JSON dict

    Raises:
        ValueError: If output is not valid JSON or missing required keys
    """
    output = str(output)

    # Agents sometimes wrap JSON in markdown code fences
    if "```json" in output:
        start = output.find("```json") + 7
        end = output.find("```", start)
        output = output[start:end].strip()
    elif "```" in output:
        start = output.find("```") + 3
        end = output.find("```", start)
        output = output[start:end].strip()

    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON output: {e}")

    if not isinstance(data, dict):
        raise ValueError("Agent output is not a JSON object")

    missing = [key for key in required_keys if key not in data]
    if missing:
        raise ValueError(f"Missing required keys in output: {missing}")

    return data
