"""LLM client factories for the web-grounded generation providers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from newsrelay.config import settings
from newsrelay.services.env_safety import sanitize_ssl_keylogfile


@dataclass
class Usage:
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass
class Completion:
    text: str
    model: str
    usage: Usage = field(default_factory=Usage)


def _temperature_for_model(model: str) -> int:
    # Some OpenAI GPT-5-compatible gateways reject temperature=0.
    if "gpt-5" in (model or "").lower():
        return 1
    return 0


def get_openrouter_client() -> Any:
    """OpenRouter via the OpenAI-compatible SDK."""
    from openai import AsyncOpenAI

    sanitize_ssl_keylogfile()
    base_url = settings.openrouter_base_url.strip() or "https://openrouter.ai/api/v1"
    return AsyncOpenAI(
        api_key=settings.openrouter_api_key,
        base_url=base_url,
        timeout=settings.provider_timeout_seconds * 4,
    )


def get_anthropic_client() -> Any:
    import anthropic

    sanitize_ssl_keylogfile()
    return anthropic.AsyncAnthropic(
        api_key=settings.anthropic_api_key,
        timeout=settings.provider_timeout_seconds * 4,
    )


def get_model() -> str:
    """Get the active OpenRouter model id."""
    if settings.openrouter_model:
        return settings.openrouter_model
    return settings.default_model


_openrouter_client: Any | None = None
_anthropic_client: Any | None = None


def openrouter_client() -> Any:
    global _openrouter_client
    if _openrouter_client is None:
        _openrouter_client = get_openrouter_client()
    return _openrouter_client


def anthropic_client() -> Any:
    global _anthropic_client
    if _anthropic_client is None:
        _anthropic_client = get_anthropic_client()
    return _anthropic_client


async def openrouter_web_completion(system: str, prompt: str, *, max_results: int) -> Completion:
    """Chat completion with OpenRouter's web plugin grounding the answer."""
    model = get_model()
    response = await openrouter_client().chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ],
        max_tokens=settings.generation_max_tokens,
        temperature=_temperature_for_model(model),
        extra_body={"plugins": [{"id": "web", "max_results": max_results}]},
    )
    text = ""
    if response.choices:
        text = getattr(response.choices[0].message, "content", None) or ""
    usage = getattr(response, "usage", None)
    return Completion(
        text=text,
        model=model,
        usage=Usage(
            input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            output_tokens=getattr(usage, "completion_tokens", 0) or 0,
        ),
    )


async def anthropic_web_completion(system: str, prompt: str) -> Completion:
    """Messages call with the server-side web_search tool enabled."""
    model = settings.anthropic_model
    response = await anthropic_client().messages.create(
        model=model,
        max_tokens=settings.generation_max_tokens,
        system=system,
        messages=[{"role": "user", "content": prompt}],
        tools=[
            {
                "type": "web_search_20250305",
                "name": "web_search",
                "max_uses": settings.anthropic_web_search_max_uses,
            }
        ],
    )
    # Search tool blocks are interleaved with text; only text carries the answer.
    text = "".join(
        getattr(block, "text", "") or ""
        for block in response.content
        if getattr(block, "type", None) == "text"
    )
    usage = getattr(response, "usage", None)
    return Completion(
        text=text,
        model=model,
        usage=Usage(
            input_tokens=getattr(usage, "input_tokens", 0) or 0,
            output_tokens=getattr(usage, "output_tokens", 0) or 0,
        ),
    )
