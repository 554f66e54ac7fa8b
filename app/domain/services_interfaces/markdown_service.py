from abc import ABC, abstractmethod
from app.domain.entities.markdown import ValidatedMarkdown


class MarkdownServiceInterface(ABC):
    @abstractmethod
    def md_to_html(self, md: str, include_html: bool = True) -> ValidatedMarkdown:
        """
        Converts Markdown to HTML. Raw HTML and images are not allowed and are dropped,
        links and images are collected in the order they appear.

        :param md: Markdown text
        :param include_html: False to collect links only and return empty HTML
        :return: ValidatedMarkdown with the HTML and what was found or dropped
        """
        pass
