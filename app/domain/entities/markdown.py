import logging
from pydantic import BaseModel


logger = logging.getLogger('utils')


"""
ValidatedMarkdown Entity:
The result of converting Markdown into HTML with disallowed elements removed.
1. html (str): HTML without raw HTML tags and images.
2. ignored (list[str]): Disallowed elements that were dropped, e.g. `<script>` or `image (/img.png)`.
3. links (list[str]): Link URLs in the order they appear, not validated.
4. images (list[str]): Image URLs in the order they appear, not validated.
"""
class ValidatedMarkdown(BaseModel):
    html: str = ""
    ignored: list[str] = []
    links: list[str] = []
    images: list[str] = []


def sort_links(question_links: list[str],
               correct_answer_links: list[str],
               incorrect_answer_links: list[str]) -> list[str]:
    """
    Combines the links into a single list in the logical order: question links first,
    then links from correct answers, then links from incorrect answers.
    Each group is sorted alphabetically after removing the #-part of the links.
    A link is kept only in the first group it appears in.

    :param question_links: Links from the question text
    :param correct_answer_links: Links from correct answers and their explanations
    :param incorrect_answer_links: Links from incorrect answers and their explanations
    :return: Combined list of links
    """
    groups = [
        sorted(link.split('#', 1)[0] for link in links)
        for links in (question_links, correct_answer_links, incorrect_answer_links)
    ]

    all_links = []
    for group in groups:
        for link in group:
            if link not in all_links:
                all_links.append(link)

    logger.info(f"Returning {len(all_links)} links")
    return all_links
