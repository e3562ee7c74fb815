"""
Trending Topics

Maps a user's niche and keywords to an ordered list of topics used as
context for caption generation. Topics come from a static per-niche table
plus one pseudo-topic per keyword; nothing here calls the network.
"""

from typing import Dict, List, Optional

MAX_TOPICS = 10
MAX_KEYWORD_TOPICS = 5
DEFAULT_NICHE = "general"

NICHE_TOPICS: Dict[str, List[str]] = {
    "tech": [
        "AI and Machine Learning",
        "Web3 and Blockchain",
        "Cloud Computing",
        "Cybersecurity",
        "DevOps",
        "Artificial Intelligence",
        "Software Development",
    ],
    "business": [
        "Entrepreneurship",
        "Business Growth",
        "Leadership",
        "Marketing Strategy",
        "Sales Techniques",
        "Business Analytics",
        "Corporate Culture",
    ],
    "lifestyle": [
        "Wellness",
        "Fitness Trends",
        "Mental Health",
        "Self-improvement",
        "Work-life Balance",
        "Productivity",
        "Personal Development",
    ],
    "marketing": [
        "Digital Marketing",
        "Social Media Marketing",
        "Content Marketing",
        "SEO",
        "Email Marketing",
        "Influencer Marketing",
        "Marketing Automation",
    ],
    DEFAULT_NICHE: [
        "Trending Now",
        "Viral Content",
        "Current Events",
        "Popular Culture",
        "Entertainment",
        "News",
        "Social Trends",
    ],
}

# Words that mark a topic as relevant to a niche
NICHE_KEYWORDS: Dict[str, List[str]] = {
    "tech": ["ai", "code", "software", "development", "tech", "programming", "data"],
    "business": ["business", "growth", "sales", "marketing", "leadership", "strategy"],
    "lifestyle": ["health", "wellness", "fitness", "life", "personal", "mindfulness"],
    "marketing": ["marketing", "social", "content", "brand", "audience", "engagement"],
}


def niche_topics(niche: Optional[str]) -> List[str]:
    """Static topics for a niche, falling back to the general list."""
    key = (niche or DEFAULT_NICHE).strip().lower()
    return list(NICHE_TOPICS.get(key, NICHE_TOPICS[DEFAULT_NICHE]))


def keyword_topics(keywords: Optional[List[str]]) -> List[str]:
    return [f"{keyword} trends" for keyword in (keywords or [])[:MAX_KEYWORD_TOPICS]]


def get_trending_topics(niche: Optional[str], keywords: Optional[List[str]] = None) -> List[str]:
    """
    Topics for a niche plus keyword pseudo-topics.

    Duplicates are dropped keeping the first occurrence, and the result is
    capped at ``MAX_TOPICS`` entries.
    """
    topics = niche_topics(niche) + keyword_topics(keywords)
    unique = list(dict.fromkeys(topics))
    return unique[:MAX_TOPICS]


def relevance_score(topic: str, niche: Optional[str]) -> float:
    topic_lower = topic.lower()
    score = 0.3
    for keyword in NICHE_KEYWORDS.get((niche or "").lower(), []):
        if keyword in topic_lower:
            score += 0.5
    return min(score, 1.0)


def analyze_relevance(topics: List[str], niche: Optional[str]) -> List[Dict]:
    """Rank topics by how many niche keywords they mention."""
    scored = [{"topic": topic, "relevanceScore": relevance_score(topic, niche)} for topic in topics]
    return sorted(scored, key=lambda item: item["relevanceScore"], reverse=True)


def trending_hashtags(topic: str) -> List[str]:
    """Hashtag suggestions derived from a topic phrase."""
    words = topic.split()
    if not words:
        return ["#trending", "#viral"]
    candidates = [
        "#" + "".join(words),
        "#" + words[0],
        "#trending",
        "#viral",
    ]
    return [tag for tag in dict.fromkeys(candidates) if len(tag) > 2]
