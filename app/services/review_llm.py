from __future__ import annotations

import logging
import os
import time
from functools import lru_cache

from openai import OpenAI

logger = logging.getLogger(__name__)

RESUME_REVIEW_PROMPT = """Please review this resume and provide feedback based on the following criteria:

Summary (2-3 sentences):
- Evaluate if it effectively communicates passion
- Check if it clearly states desired work/role
- Assess if it highlights relevant strengths
- Look for unique personal touches reflecting career shift (if they are shifting) and passion

Highlights/Proficiencies:
- Evaluate relevance of skills to target role
- Check for transferable skills from non-tech experience
- Assess clarity and organization of skills presentation

Work Experience:
- Check if bullet points start with strong action verbs
- Evaluate quantification of achievements
- Assess impact demonstration
- Look for clarity and relevance of experience

Education:
- Verify highest education level is clearly stated
- Check for School/Course/Year format
- Evaluate if key learnings are effectively summarized

Please provide specific recommendations for improvement in each area.
And general recommendations for the resume.
Do not add any other text to the response.
Do not include recommendations for visual appeal.

Resume text to review:
"""


class ReviewLLMError(RuntimeError):
    def __init__(self, message: str, *, code: str = "llm_unavailable"):
        super().__init__(message)
        self.code = code


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def review_llm_enabled() -> bool:
    if not _env_bool("REVIEW_LLM_ENABLED", True):
        return False
    api_key = (os.getenv("OPENAI_API_KEY") or "").strip()
    if not api_key or _looks_like_placeholder(api_key):
        return False
    return True


@lru_cache(maxsize=1)
def _client() -> OpenAI:
    return OpenAI(
        api_key=(os.getenv("OPENAI_API_KEY") or "").strip(),
        base_url=(os.getenv("OPENAI_BASE_URL") or None),
        timeout=float(os.getenv("REVIEW_LLM_TIMEOUT_S", "45")),
        max_retries=int(os.getenv("OPENAI_MAX_RETRIES", "2")),
    )


def _model() -> str:
    return (os.getenv("AI_MODEL") or os.getenv("OPENAI_MODEL") or "gpt-4o-mini").strip()


def generate_resume_review(resume_text: str, *, max_output_tokens: int = 1500) -> str:
    if not review_llm_enabled():
        raise ReviewLLMError("Resume review is not configured.", code="llm_disabled")

    started = time.perf_counter()
    try:
        response = _client().chat.completions.create(
            model=_model(),
            messages=[{"role": "user", "content": RESUME_REVIEW_PROMPT + resume_text}],
            temperature=0.3,
            max_tokens=max_output_tokens,
        )
    except Exception as exc:  # noqa: BLE001 - surfaced as a single review failure
        logger.warning("review_llm_failed model=%s prompt_len=%s: %s", _model(), len(resume_text), exc)
        raise ReviewLLMError("Failed to analyze resume") from exc

    content = response.choices[0].message.content if response.choices else ""
    latency_ms = int((time.perf_counter() - started) * 1000)
    if not content or not str(content).strip():
        logger.warning("review_llm_empty model=%s latency_ms=%s", _model(), latency_ms)
        raise ReviewLLMError("Failed to analyze resume", code="llm_empty")

    logger.info("review_llm_success model=%s latency_ms=%s", _model(), latency_ms)
    return str(content).strip()
