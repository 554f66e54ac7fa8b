import logging
import random
from typing import Optional


logger = logging.getLogger('utils')

# Must be kept in sync with the front-end manually
TOPICS = ["aws", "css", "general", "js-ts", "rust"]
TOPIC_NAMES = ["AWS", "CSS", "General", "JS / TS", "Rust"]

# A placeholder the front-end sends instead of a topic to get a question from any of them
ANY_TOPIC = "any"


def is_valid_topic(topic: Optional[str]) -> bool:
    return topic in TOPICS


def into_name(topic: str) -> str:
    """
    Returns the display name of the topic, e.g. `js-ts` -> `JS / TS`.

    :param topic: One of TOPICS
    :return: The display name or an empty string for unknown topics
    """
    if topic in TOPICS:
        return TOPIC_NAMES[TOPICS.index(topic)]
    return ""


def filter_valid_topics(topics: list[str]) -> list[str]:
    """
    Returns only the valid topics from the given list, preserving the order.
    `any` is expanded into the full list of topics.

    :param topics: Topics as they came from the request
    :return: A list that contains TOPICS members only
    """
    if not topics:
        logger.info("No topics provided")
        return []

    valid_topics = []
    for topic in topics:
        if topic == ANY_TOPIC:
            valid_topics.extend(t for t in TOPICS if t not in valid_topics)
        elif topic in TOPICS:
            if topic not in valid_topics:
                valid_topics.append(topic)
        else:
            logger.info(f"Invalid topic: {topic}")
    return valid_topics


def parse_topic_list(value: Optional[str]) -> list[str]:
    # URL params carry multiple topics as a dot-separated list, e.g. aws.rust
    if not value:
        return []
    return [t.strip().lower() for t in value.split('.') if t.strip()]


def candidate_topics(value: Optional[str], rng: random.Random) -> list[str]:
    """
    Turns the topic param of a random question request into a list of topics to try.
    A missing value or `any` means all topics. The list is shuffled to spread the load
    across topics.

    :param value: The raw topic param, a single topic or a dot-separated list
    :param rng: The random generator to shuffle with
    :return: A shuffled list of valid topics, possibly empty
    """
    topics = parse_topic_list(value) or [ANY_TOPIC]
    topics = filter_valid_topics(topics)
    rng.shuffle(topics)
    return topics
