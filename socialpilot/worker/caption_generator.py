"""
Caption Generator

Builds a prompt from the user's niche, style, audience, trending topics and
past engagement, sends it to an OpenAI chat completion model and parses the
strict JSON reply:

    {"caption": str, "hashtags": [str], "trendingTopics": [str], "confidenceScore": float}

Any transport failure or malformed reply raises GenerationError. There is
no retry and no fallback caption.
"""

import json
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..config import Settings
from ..errors import GenerationError
from ..logging_config import pipeline_logger

SYSTEM_PROMPT = (
    "You are an expert social media content creator. Generate engaging captions "
    "with relevant hashtags and trending topics. Always respond in valid JSON format."
)

PROFILING_SYSTEM_PROMPT = "You are an expert at understanding user preferences and niches."

DEFAULT_CONFIDENCE = 0.8

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


@dataclass
class CaptionGeneratorConfig:
    """Connection and sampling settings for the completion service"""
    api_key: str
    model: str = "gpt-3.5-turbo"
    temperature: float = 0.7
    max_tokens: int = 500
    timeout: float = 60.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "CaptionGeneratorConfig":
        return cls(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            temperature=settings.openai_temperature,
            max_tokens=settings.openai_max_tokens,
            timeout=settings.openai_timeout,
        )


@dataclass
class CaptionRequest:
    """Everything the prompt is built from"""
    niche: Optional[str] = None
    style: Optional[str] = None
    target_audience: Optional[str] = None
    trending_topics: Optional[List[str]] = None
    image_description: str = ""
    past_engagement: Optional[List[Dict[str, Any]]] = None


@dataclass
class GeneratedCaption:
    caption: str
    hashtags: List[str]
    trending_topics: List[str]
    confidence_score: float


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def average_engagement(posts: List[Dict[str, Any]]) -> Optional[Dict[str, int]]:
    """Average likes/comments/shares across past posts, or None without history."""
    if not posts:
        return None

    totals = {"likes": 0, "comments": 0, "shares": 0}
    for post in posts:
        for key in totals:
            totals[key] += post.get(key) or 0

    count = len(posts)
    return {
        "avgLikes": _round_half_up(totals["likes"] / count),
        "avgComments": _round_half_up(totals["comments"] / count),
        "avgShares": _round_half_up(totals["shares"] / count),
    }


def build_prompt(request: CaptionRequest) -> str:
    niche = request.niche or "general"
    style = request.style or "professional"
    audience = request.target_audience or "general audience"

    lines = [
        "Generate a social media caption for the following context:",
        "",
        f"Niche: {niche}",
        f"Posting Style: {style}",
        f"Target Audience: {audience}",
    ]

    if request.image_description:
        lines.append(f"Image Description: {request.image_description}")

    if request.trending_topics:
        lines.append(f"Trending Topics to Consider: {', '.join(request.trending_topics)}")

    averages = average_engagement(request.past_engagement or [])
    if averages:
        lines.append(f"Past High-Engagement Patterns: {json.dumps(averages)}")

    lines.append("")
    lines.append(
        "Respond with a JSON object containing:\n"
        "{\n"
        '  "caption": "engaging caption text",\n'
        '  "hashtags": ["hashtag1", "hashtag2", ...],\n'
        '  "trendingTopics": ["topic1", "topic2", ...],\n'
        '  "confidenceScore": 0.0-1.0\n'
        "}"
    )
    return "\n".join(lines)


def _string_list(payload: Dict[str, Any], key: str) -> List[str]:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise GenerationError(f"Completion field '{key}' must be a list of strings")
    return value


def parse_completion(content: Optional[str]) -> GeneratedCaption:
    """Validate the model's JSON reply against the caption contract."""
    if not content:
        raise GenerationError("Completion service returned an empty response")

    text = content.strip()
    fenced = _FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise GenerationError(f"Completion response is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise GenerationError("Completion response must be a JSON object")

    caption = payload.get("caption")
    if not isinstance(caption, str) or not caption.strip():
        raise GenerationError("Completion response is missing a caption")

    score = payload.get("confidenceScore")
    if score is None:
        score = DEFAULT_CONFIDENCE
    elif isinstance(score, bool) or not isinstance(score, (int, float)):
        raise GenerationError("Completion field 'confidenceScore' must be a number")
    elif isinstance(score, float) and not math.isfinite(score):
        raise GenerationError("Completion field 'confidenceScore' must be a finite number")

    return GeneratedCaption(
        caption=caption.strip(),
        hashtags=_string_list(payload, "hashtags"),
        trending_topics=_string_list(payload, "trendingTopics"),
        confidence_score=min(max(float(score), 0.0), 1.0),
    )


class CaptionGenerator:
    """Generate captions through the OpenAI chat completions API"""

    def __init__(self, config: CaptionGeneratorConfig, client=None):
        self.config = config
        self._client = client

    @property
    def model(self) -> str:
        return self.config.model

    def _get_client(self):
        if self._client is None:
            if not self.config.api_key:
                raise GenerationError("Caption generation is not configured. Set OPENAI_API_KEY.")
            import openai
            self._client = openai.OpenAI(api_key=self.config.api_key, timeout=self.config.timeout)
        return self._client

    def _complete(self, system: str, prompt: str, max_tokens: int) -> str:
        client = self._get_client()
        response = client.chat.completions.create(
            model=self.config.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            temperature=self.config.temperature,
            max_tokens=max_tokens,
        )
        return response.choices[0].message.content

    def generate(self, request: CaptionRequest) -> GeneratedCaption:
        """
        Generate one caption.

        Raises:
            GenerationError: the completion call failed or the reply broke the
                JSON contract.
        """
        prompt = build_prompt(request)

        try:
            content = self._complete(SYSTEM_PROMPT, prompt, self.config.max_tokens)
        except GenerationError:
            raise
        except Exception as e:
            pipeline_logger.warning("Caption completion failed", error_type=type(e).__name__, error_message=str(e))
            raise GenerationError(f"Failed to generate caption: {e}") from e

        result = parse_completion(content)
        pipeline_logger.info(
            "Caption generated",
            model=self.config.model,
            hashtags=len(result.hashtags),
            confidence=result.confidence_score,
        )
        return result

    def generate_profiling_questions(self, context: Dict[str, Any]) -> List[str]:
        """Five onboarding questions for the user, or [] when the model is unavailable."""
        prompt = (
            "Generate 5 specific questions to better understand a social media user's "
            "preferences and niche.\n"
            f"Current context: {json.dumps(context, default=str)}\n\n"
            'Respond with a JSON object:\n{\n  "questions": ["question1", "question2", ...]\n}'
        )

        try:
            content = self._complete(PROFILING_SYSTEM_PROMPT, prompt, 300)
            payload = json.loads(content)
        except Exception as e:
            pipeline_logger.warning("Profiling question generation failed", error_message=str(e))
            return []

        questions = payload.get("questions") if isinstance(payload, dict) else None
        if not isinstance(questions, list):
            return []
        return [q for q in questions if isinstance(q, str)]
