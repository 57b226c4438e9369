import pytest

from app.utils.crawlers import crawler_matches, is_search_engine_crawler


@pytest.mark.parametrize(
    "user_agent",
    [
        "Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)",
        "Mozilla/5.0 (compatible; bingbot/2.0; +http://www.bing.com/bingbot.htm)",
        "DuckDuckBot/1.1; (+http://duckduckgo.com/duckduckbot.html)",
        "facebookexternalhit/1.1 (+http://www.facebook.com/externalhit_uatext.php)",
        "Slackbot-LinkExpanding 1.0 (+https://api.slack.com/robots)",
        "Mozilla/5.0 (compatible; Discordbot/2.0; +https://discordapp.com)",
        "my-little-crawler 0.1",
    ],
)
def test_known_crawlers_are_detected(user_agent):
    assert is_search_engine_crawler(user_agent) is True


@pytest.mark.parametrize(
    "user_agent",
    [
        None,
        "",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0 Safari/537.36",
        "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) Version/17.0 Mobile/15E148 Safari/604.1",
    ],
)
def test_browsers_are_not_crawlers(user_agent):
    assert is_search_engine_crawler(user_agent) is False


def test_detection_ignores_case():
    assert is_search_engine_crawler("GOOGLEBOT") is True


def test_crawler_matches_lists_rules():
    matches = crawler_matches("Googlebot/2.1")
    assert 'token "googlebot"' in matches
    assert crawler_matches("Mozilla/5.0 Firefox/121.0") == []
