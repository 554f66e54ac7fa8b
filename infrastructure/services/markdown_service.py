import logging
import xml.etree.ElementTree as etree
import markdown
from markdown.inlinepatterns import HTML_RE, InlineProcessor
from markdown.treeprocessors import Treeprocessor
from app.domain.entities.markdown import ValidatedMarkdown
from app.domain.services_interfaces.markdown_service import MarkdownServiceInterface


logger = logging.getLogger('utils')

MARKDOWN_EXTENSIONS = ['fenced_code']


class IgnoredHtmlProcessor(InlineProcessor):
    """Drops inline HTML tags and remembers what was dropped."""

    def __init__(self, pattern, md, ignored: list):
        super().__init__(pattern, md)
        self.ignored = ignored

    def handleMatch(self, m, data):
        self.ignored.append(m.group(1))
        return '', m.start(0), m.end(0)


class LinkCollector(Treeprocessor):
    """Collects link URLs and replaces images with their alt text."""

    def __init__(self, md, result: ValidatedMarkdown):
        super().__init__(md)
        self.result = result

    def run(self, root: etree.Element):
        for parent in list(root.iter()):
            for child in list(parent):
                if child.tag == 'a':
                    href = child.get('href')
                    if href:
                        self.result.links.append(href)
                elif child.tag == 'img':
                    self._drop_image(parent, child)

    def _drop_image(self, parent: etree.Element, img: etree.Element):
        src = img.get('src', '')
        self.result.images.append(src)
        self.result.ignored.append(f"image ({src})")

        text = (img.get('alt') or '') + (img.tail or '')
        children = list(parent)
        index = children.index(img)
        if index > 0:
            previous = children[index - 1]
            previous.tail = (previous.tail or '') + text
        else:
            parent.text = (parent.text or '') + text
        parent.remove(img)


class MarkdownService(MarkdownServiceInterface):
    def md_to_html(self, md, include_html=True):
        result = ValidatedMarkdown()
        if not md:
            return result

        # A new converter per call since the processors write into the result
        converter = markdown.Markdown(extensions=MARKDOWN_EXTENSIONS)
        converter.preprocessors.deregister('html_block')
        converter.inlinePatterns.register(IgnoredHtmlProcessor(HTML_RE, converter, result.ignored), 'html', 90)
        converter.treeprocessors.register(LinkCollector(converter, result), 'link_collector', 15)

        html = converter.convert(md)
        if include_html:
            result.html = html

        logger.info(f"MD: {len(md)}, HTML len: {len(result.html)}, ignored: {len(result.ignored)}, "
                    f"links: {len(result.links)}, images: {len(result.images)}")
        return result
