import logging
import re
from typing import Optional
from app.domain.entities.topic import into_name
from app.domain.repositories_interfaces.asset_repo import AssetRepoInterface


logger = logging.getLogger('use_cases')

INDEX_KEY = "index.html"
DEFAULT_OG_IMAGE = "/og-images/default.png"

TITLE_PATTERNS = [
    re.compile(r'(<title>)([^<]+)'),
    re.compile(r'("og:title"[^>]+content=")([^"]+)'),
    re.compile(r'("twitter:title"[^>]+content=")([^"]+)'),
]


def replace_title_and_image(index_html: str, topic: str) -> str:
    """
    Puts the topic name into the title and social media tags and swaps the
    default social media image for the topic one.

    :param index_html: The page as stored
    :param topic: Topic from the URL
    :return: Updated page or the original page if the topic is unknown
    """
    topic_name = into_name(topic)
    if not topic_name:
        logger.info(f"Invalid topic: {topic}")
        return index_html

    title = f"{topic_name}: something I learned today"
    for pattern in TITLE_PATTERNS:
        index_html = pattern.sub(lambda m: m.group(1) + title, index_html, count=1)

    return index_html.replace(DEFAULT_OG_IMAGE, f"/og-images/og-{topic}.png")


class IndexUseCases:
    def __init__(self, asset_repo: AssetRepoInterface):
        self.asset_repo = asset_repo

    async def get_index(self, topic: Optional[str]) -> str:
        index_html = await self.asset_repo.get(INDEX_KEY)
        if not topic:
            logger.info("Missing topic in the query string")
            return index_html
        logger.info(f"Topic: {topic}")
        return replace_title_and_image(index_html, topic)
