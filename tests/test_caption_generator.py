"""
Tests for prompt building and completion parsing.
"""
import json

import pytest

from socialpilot.errors import GenerationError
from socialpilot.worker.caption_generator import (
    CaptionGenerator,
    CaptionGeneratorConfig,
    CaptionRequest,
    average_engagement,
    build_prompt,
    parse_completion,
)
from conftest import FakeCompletionClient


class TestAverageEngagement:

    def test_no_history(self):
        assert average_engagement([]) is None

    def test_rounds_half_up(self):
        posts = [
            {"likes": 1, "comments": 0, "shares": 3},
            {"likes": 2, "comments": 1, "shares": 4},
        ]
        assert average_engagement(posts) == {"avgLikes": 2, "avgComments": 1, "avgShares": 4}

    def test_missing_counts_are_zero(self):
        assert average_engagement([{"likes": 4}, {}]) == {"avgLikes": 2, "avgComments": 0, "avgShares": 0}


class TestBuildPrompt:

    def test_defaults(self):
        prompt = build_prompt(CaptionRequest())
        assert "Niche: general" in prompt
        assert "Posting Style: professional" in prompt
        assert "Target Audience: general audience" in prompt
        assert "Trending Topics" not in prompt
        assert "Past High-Engagement Patterns" not in prompt

    def test_full_context(self):
        prompt = build_prompt(CaptionRequest(
            niche="tech",
            style="casual",
            target_audience="founders",
            trending_topics=["AI", "rust trends"],
            image_description="a laptop on a desk",
            past_engagement=[{"likes": 10, "comments": 2, "shares": 1}],
        ))
        assert "Posting Style: casual" in prompt
        assert "Image Description: a laptop on a desk" in prompt
        assert "Trending Topics to Consider: AI, rust trends" in prompt
        assert 'Past High-Engagement Patterns: {"avgLikes": 10, "avgComments": 2, "avgShares": 1}' in prompt


class TestParseCompletion:

    def test_valid(self):
        result = parse_completion(json.dumps({
            "caption": " Hello ",
            "hashtags": ["#a"],
            "trendingTopics": ["AI"],
            "confidenceScore": 0.4,
        }))
        assert result.caption == "Hello"
        assert result.hashtags == ["#a"]
        assert result.trending_topics == ["AI"]
        assert result.confidence_score == 0.4

    def test_fenced_json(self):
        content = '```json\n{"caption": "Hi", "hashtags": []}\n```'
        assert parse_completion(content).caption == "Hi"

    def test_missing_confidence_defaults(self):
        assert parse_completion('{"caption": "Hi"}').confidence_score == 0.8

    @pytest.mark.parametrize("score,expected", [(7, 1.0), (-2, 0.0), (0, 0.0)])
    def test_confidence_clamped(self, score, expected):
        content = json.dumps({"caption": "Hi", "confidenceScore": score})
        assert parse_completion(content).confidence_score == expected

    @pytest.mark.parametrize("content", [
        None,
        "",
        "not json at all",
        "[1, 2]",
        '{"hashtags": ["#a"]}',
        '{"caption": "   "}',
        '{"caption": "Hi", "hashtags": "#a #b"}',
        '{"caption": "Hi", "confidenceScore": "high"}',
        '{"caption": "Hi", "confidenceScore": NaN}',
        '{"caption": "Hi", "confidenceScore": Infinity}',
        '{"caption": "Hi", "confidenceScore": -Infinity}',
    ])
    def test_rejects_malformed(self, content):
        with pytest.raises(GenerationError):
            parse_completion(content)


class TestCaptionGenerator:

    def test_generate_sends_prompt(self):
        client = FakeCompletionClient()
        generator = CaptionGenerator(
            CaptionGeneratorConfig(api_key="k", model="gpt-4o-mini", temperature=0.2, max_tokens=123),
            client=client,
        )

        result = generator.generate(CaptionRequest(niche="tech"))

        call = client.completions.calls[0]
        assert call["model"] == "gpt-4o-mini"
        assert call["temperature"] == 0.2
        assert call["max_tokens"] == 123
        assert call["messages"][0]["role"] == "system"
        assert "Niche: tech" in call["messages"][1]["content"]
        assert result.caption == "Shipping Rust services to production this week"

    def test_transport_error_wrapped(self):
        client = FakeCompletionClient(error=ConnectionError("timeout"))
        generator = CaptionGenerator(CaptionGeneratorConfig(api_key="k"), client=client)

        with pytest.raises(GenerationError, match="timeout"):
            generator.generate(CaptionRequest())

    def test_missing_api_key(self):
        generator = CaptionGenerator(CaptionGeneratorConfig(api_key=""))

        with pytest.raises(GenerationError, match="OPENAI_API_KEY"):
            generator.generate(CaptionRequest())

    def test_profiling_questions(self):
        client = FakeCompletionClient(content=json.dumps({"questions": ["What do you sell?", 3]}))
        generator = CaptionGenerator(CaptionGeneratorConfig(api_key="k"), client=client)

        assert generator.generate_profiling_questions({"niche": "tech"}) == ["What do you sell?"]

    def test_profiling_questions_failure_is_empty(self):
        client = FakeCompletionClient(error=RuntimeError("down"))
        generator = CaptionGenerator(CaptionGeneratorConfig(api_key="k"), client=client)

        assert generator.generate_profiling_questions({}) == []
