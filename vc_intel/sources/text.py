"""
Text utilities shared across sources.

These are deliberately simple heuristics for turning headlines into
record fields (trend names, company names, funding types, categories).
"""

import hashlib
import re
from datetime import datetime, timezone

# Category keywords, checked in order; first match wins
CATEGORY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "ai-ml": ("ai", "ml", "llm", "gpt", "neural", "machine learning", "pytorch", "agent", "transformer"),
    "web3-crypto": ("blockchain", "crypto", "web3", "ethereum", "solana", "defi", "nft"),
    "fintech": ("fintech", "payment", "trading", "banking", "wallet"),
    "healthcare": ("health", "biotech", "medical", "pharma"),
    "climate": ("climate", "green", "energy", "sustainability", "carbon", "solar"),
    "cybersecurity": ("security", "encryption", "penetration", "vulnerability"),
    "saas": ("saas", "startup", "cloud", "productivity", "analytics", "crm"),
}

# Ordered most specific first
FUNDING_TYPES: tuple[tuple[str, str], ...] = (
    ("series a", "Series A"),
    ("seed", "Seed"),
    ("series b", "Series B"),
    ("series c", "Series C"),
    ("acquisition", "Acquisition"),
    ("acquires", "Acquisition"),
    ("ipo", "IPO"),
    ("raise", "Funding Round"),
)

DEAL_KEYWORDS = (
    "funding",
    "series a",
    "series b",
    "series c",
    "seed",
    "acquisition",
    "acquires",
    "ipo",
    "raise",
    "investment",
)


def clean_text(text: str) -> str:
    """Collapse whitespace and strip control characters."""
    text = " ".join(text.split())
    text = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", text)
    return text.strip()


def stable_hash(value: str) -> str:
    """
    Deterministic 16-hex-char id for a string (typically a URL).

    Unlike hash(), stable across process restarts.
    """
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:16]


def _contains_word(text: str, keyword: str) -> bool:
    # Short keywords ("ai", "ml") only count as whole words
    if len(keyword) <= 3:
        return re.search(rf"\b{re.escape(keyword)}\b", text) is not None
    return keyword in text


def categorize(text: str) -> str:
    lower = text.lower()
    for category, keywords in CATEGORY_KEYWORDS.items():
        if any(_contains_word(lower, kw) for kw in keywords):
            return category
    return "other"


def extract_trend_name(title: str, max_words: int = 3) -> str:
    """Take the first few significant (longer than 3 chars) words of a title."""
    title = clean_text(title)
    words = [w for w in title.split(" ") if len(w) > 3]
    return " ".join(words[:max_words]) or title[:30]


def extract_company_name(title: str, default: str = "Unknown") -> str:
    """First capitalised word longer than two characters."""
    for word in clean_text(title).split(" "):
        if len(word) > 2 and word[0].isupper():
            return word.strip(",.:;'\"")
    return default


def extract_funding_type(title: str) -> str:
    lower = title.lower()
    for keyword, label in FUNDING_TYPES:
        if keyword in lower:
            return label
    return "Funding"


def is_deal_headline(title: str) -> bool:
    lower = title.lower()
    return any(kw in lower for kw in DEAL_KEYWORDS)


def parse_timestamp(value: str | int | float | None) -> datetime | None:
    """Parse unix seconds or ISO-8601 (with optional Z suffix) into aware UTC."""
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
