"""
LLM Client Abstraction
Single entry point for all AI calls in SmartRate Estimator.
Primary: Google Gemini Flash via litellm (vision + JSON mode).
Fallback: optional second provider (LLM_FALLBACK_MODEL); disabled when unset.
"""
import logging
from typing import Optional

import litellm

from app import config
from app.services.errors import ExternalCapabilityError

logger = logging.getLogger("smartrate-llm")

# Suppress litellm verbose logging
litellm.set_verbose = False


def _fallback_messages(messages: list, json_mode: bool) -> list:
    """Copy of messages for providers without json_object response_format."""
    msgs = [dict(m) for m in messages]
    if not json_mode:
        return msgs
    if msgs and msgs[0]["role"] == "system":
        msgs[0]["content"] = msgs[0]["content"] + "\n\nIMPORTANT: Respond with valid JSON only."
    else:
        msgs = [{"role": "system", "content": "You must respond with valid JSON only."}] + msgs
    return msgs


async def _acomplete(model: str, messages: list, **kwargs) -> str:
    response = await litellm.acompletion(model=model, messages=messages, **kwargs)
    content = response.choices[0].message.content
    if not content:
        raise ExternalCapabilityError(f"{model} returned an empty response")
    return content


async def complete(
    messages: list,
    temperature: Optional[float] = None,
    json_mode: bool = False,
    max_tokens: Optional[int] = None,
    model: Optional[str] = None,
) -> str:
    """
    Call the primary LLM. Falls back to LLM_FALLBACK_MODEL on error when one is configured.
    Returns the response content string.
    """
    primary = model or config.LLM_PRIMARY_MODEL
    kwargs = {
        "temperature": config.LLM_TEMPERATURE if temperature is None else temperature,
        "max_tokens": max_tokens or config.LLM_MAX_TOKENS,
        "timeout": config.LLM_TIMEOUT_S,
    }

    try:
        if json_mode:
            return await _acomplete(primary, messages, response_format={"type": "json_object"}, **kwargs)
        return await _acomplete(primary, messages, **kwargs)
    except litellm.RateLimitError as e:
        logger.warning(f"{primary} rate limit hit", extra={"model": primary})
        last_error: Exception = e
    except litellm.AuthenticationError as e:
        logger.warning(f"{primary} auth error", extra={"model": primary})
        last_error = e
    except Exception as e:
        logger.warning(f"{primary} error ({type(e).__name__}: {e})", extra={"model": primary})
        last_error = e

    fallback = config.LLM_FALLBACK_MODEL
    if not fallback:
        raise ExternalCapabilityError(f"LLM call failed: {last_error}") from last_error

    logger.warning(f"Falling back to {fallback}", extra={"model": fallback})
    try:
        return await _acomplete(fallback, _fallback_messages(messages, json_mode), **kwargs)
    except Exception as e:
        logger.error(f"Both LLMs failed. {fallback} error: {e}")
        raise ExternalCapabilityError(f"All LLM providers failed. Last error: {e}") from e


async def complete_with_vision(
    images_base64: list[str],
    prompt: str,
    mime_type: str = "image/jpeg",
    temperature: Optional[float] = None,
    json_mode: bool = False,
) -> str:
    """
    Vision-capable LLM call for site photos.
    images_base64: list of base64-encoded image strings, all of mime_type
    """
    content = []
    for img_b64 in images_base64:
        content.append({
            "type": "image_url",
            "image_url": {"url": f"data:{mime_type};base64,{img_b64}"}
        })
    content.append({"type": "text", "text": prompt})

    messages = [{"role": "user", "content": content}]
    return await complete(messages, temperature=temperature, json_mode=json_mode)


class LLMClient:
    """
    Class-based wrapper around the module-level complete() / complete_with_vision() functions.
    Services take an LLMClient so tests can hand them a fake.
    """

    async def chat(
        self,
        messages: list,
        temperature: Optional[float] = None,
        json_mode: bool = False,
        max_tokens: Optional[int] = None,
    ) -> str:
        return await complete(messages, temperature=temperature, json_mode=json_mode, max_tokens=max_tokens)

    async def vision(
        self,
        images_base64: list,
        prompt: str,
        mime_type: str = "image/jpeg",
        temperature: Optional[float] = None,
        json_mode: bool = False,
    ) -> str:
        return await complete_with_vision(
            images_base64, prompt, mime_type=mime_type, temperature=temperature, json_mode=json_mode
        )


def get_system_prompt(role: str) -> str:
    """Standard system prompts for different AI roles."""
    prompts = {
        "inspector": (
            "You are an expert petrol pump facility inspector and site engineer. "
            "You assess civil, electrical, mechanical and safety condition of retail fuel outlets: "
            "pavements, canopies, drainage, lighting, wiring, dispensing units, air towers and signage. "
            "Always return structured, precise data."
        ),
        "rate_analyst": (
            "You are a quantity surveyor maintaining a Schedule of Rates (SOR) for petrol pump works. "
            "You extract rate items from tenders, estimates and rate schedules, keeping names, units and "
            "rates in Indian Rupees exactly as written."
        ),
        "matcher": (
            "You are a tender analyst. You match tender requirements to Schedule of Rates items by "
            "technical similarity of material, size, grade and scope of work."
        ),
    }
    return prompts.get(role, prompts["inspector"])
