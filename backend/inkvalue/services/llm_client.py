"""
LLM Client Abstraction
Single entry point for all generative-text calls in InkValue Studio.
Primary: Google Gemini 2.5 Flash
Fallback: Groq LLaMA 3.1 70B
"""
import os
import logging
import litellm

logger = logging.getLogger("inkvalue-llm")

PRIMARY_MODEL = os.getenv("LLM_PRIMARY_MODEL", "gemini/gemini-2.5-flash")
FALLBACK_MODEL = os.getenv("LLM_FALLBACK_MODEL", "groq/llama-3.1-70b-versatile")

# Any one of these enables generative text; otherwise callers use static content
PROVIDER_KEY_VARS = ("GEMINI_API_KEY", "GROQ_API_KEY", "OPENAI_API_KEY", "ANTHROPIC_API_KEY")

# Suppress litellm verbose logging
litellm.set_verbose = False


def llm_configured() -> bool:
    return any(os.getenv(var) for var in PROVIDER_KEY_VARS)


async def complete(
    messages: list,
    temperature: float = 0.7,
    json_mode: bool = False,
    max_tokens: int = 1024,
) -> str:
    """
    Call the primary model; fall back to the secondary one on rate limit or error.
    Returns the response content string.
    """
    kwargs = {
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
    }
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}

    try:
        response = await litellm.acompletion(model=PRIMARY_MODEL, **kwargs)
        return response.choices[0].message.content
    except litellm.RateLimitError:
        logger.warning("Primary LLM rate limit hit — falling back to %s", FALLBACK_MODEL)
    except litellm.AuthenticationError:
        logger.warning("Primary LLM auth error — falling back to %s", FALLBACK_MODEL)
    except Exception as e:
        logger.warning(f"Primary LLM error ({type(e).__name__}: {e}) — falling back to {FALLBACK_MODEL}")

    try:
        fallback_kwargs = {k: v for k, v in kwargs.items() if k != "response_format"}
        if json_mode:
            fallback_kwargs["messages"] = [
                {"role": "system", "content": "You must respond with valid JSON only."}
            ] + list(fallback_kwargs["messages"])
        response = await litellm.acompletion(model=FALLBACK_MODEL, **fallback_kwargs)
        return response.choices[0].message.content
    except Exception as e:
        logger.error(f"Both LLMs failed. Fallback error: {e}")
        raise RuntimeError(f"All LLM providers failed. Last error: {e}")


def get_system_prompt(role: str) -> str:
    """Standard system prompts for the advisor roles."""
    prompts = {
        "consultant": (
            "Você é um consultor de negócios experiente para estúdios de tatuagem no Brasil. "
            "Analisa custos fixos, tempo de trabalho e margem para dizer se um preço é "
            "sustentável e competitivo. Responda sempre em português."
        ),
        "copywriter": (
            "Você escreve mensagens comerciais curtas para WhatsApp em nome de tatuadores. "
            "Tom artístico e premium, amigável mas profissional, sem hashtags."
        ),
    }
    return prompts.get(role, prompts["consultant"])
