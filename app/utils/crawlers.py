"""Search-engine and link-preview crawler detection by user agent."""
import re
from typing import List, Optional

CRAWLER_TOKENS = (
    "googlebot",
    "google-bot",
    "adsbot-google",
    "apis-google",
    "mediapartners-google",
    "bingbot",
    "msnbot",
    "yahoo slurp",
    "yahooseeker",
    "duckduckbot",
    "facebookexternalhit",
    "facebookcatalog",
    "twitterbot",
    "linkedinbot",
    "pinterest",
    "yandex",
    "baiduspider",
    "ahrefs",
    "semrush",
    "mozbot",
    "screaming frog",
    "whatsapp",
    "telegram",
    "discord",
    "slack",
)

GENERIC_BOT_PATTERNS = (
    re.compile(r"\b(?:bot|crawler|spider|scraper)\b", re.IGNORECASE),
)


def crawler_matches(user_agent: Optional[str]) -> List[str]:
    """Describe every rule the user agent trips, for diagnostics."""
    if not user_agent:
        return []

    ua = user_agent.lower()
    matches = [f'token "{token}"' for token in CRAWLER_TOKENS if token in ua]
    matches.extend(
        f'pattern "{pattern.pattern}"' for pattern in GENERIC_BOT_PATTERNS if pattern.search(ua)
    )
    return matches


def is_search_engine_crawler(user_agent: Optional[str]) -> bool:
    return bool(crawler_matches(user_agent))
