"""
Pipeline - Content Extractor

Raw HTML → readable article text, metadata, and a readability score.
"""

import re
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from honig.schemas import ArticleMetadata, ExtractedArticle


# Tried in order; the first container with enough text wins
CONTENT_SELECTORS = [
    "article",
    '[role="main"]',
    ".content",
    ".post-content",
    ".entry-content",
    ".article-content",
    ".story-body",
    "main",
    "#content",
    ".main-content",
]

NOISE_SELECTORS = [
    "nav",
    "header",
    "footer",
    ".sidebar",
    ".advertisement",
    ".ads",
    ".social-share",
    ".comments",
    ".related-posts",
    "script",
    "style",
    "noscript",
]

TITLE_SELECTORS = [
    'meta[property="og:title"]',
    'meta[name="twitter:title"]',
    "h1",
    "title",
    ".article-title",
    ".post-title",
]

MIN_CONTAINER_CHARS = 200
MIN_READABLE_CHARS = 100


class ContentExtractor:
    """Extracts readable article data from HTML. No network access."""

    def extract(self, html: str, url: str = "") -> ExtractedArticle:
        """
        Extract article data from a page.

        Args:
            html: Raw page HTML
            url: Page URL the HTML came from

        Returns:
            ExtractedArticle with title, body, metadata and readability
        """
        soup = BeautifulSoup(html, "html.parser")

        self._remove_noise(soup)

        title = self._extract_title(soup)
        body = self._clean_text(self._extract_main_content(soup))
        metadata = self._extract_metadata(soup)

        return ExtractedArticle(
            url=url,
            title=title,
            body_text=body,
            metadata=metadata,
            readability_score=readability_score(body),
        )

    def _remove_noise(self, soup: BeautifulSoup) -> None:
        for selector in NOISE_SELECTORS:
            for element in soup.select(selector):
                element.decompose()

    def _extract_title(self, soup: BeautifulSoup) -> str:
        for selector in TITLE_SELECTORS:
            element = soup.select_one(selector)
            if element is None:
                continue
            title = element.get("content") or element.get_text()
            if title and title.strip():
                return title.strip()
        return "Untitled"

    def _extract_main_content(self, soup: BeautifulSoup) -> str:
        for selector in CONTENT_SELECTORS:
            element = soup.select_one(selector)
            if element is not None:
                text = element.get_text(separator=" ")
                if len(text.strip()) > MIN_CONTAINER_CHARS:
                    return text

        # Fallback: all paragraph text
        paragraphs = [p.get_text() for p in soup.find_all("p")]
        return "\n\n".join(p.strip() for p in paragraphs if p.strip())

    def _extract_metadata(self, soup: BeautifulSoup) -> ArticleMetadata:
        keywords_raw = self._meta(soup, 'meta[name="keywords"]')
        keywords = [k.strip() for k in keywords_raw.split(",") if k.strip()] if keywords_raw else []

        html_tag = soup.find("html")
        language = html_tag.get("lang") if isinstance(html_tag, Tag) else None

        return ArticleMetadata(
            author=(
                self._meta(soup, 'meta[name="author"]')
                or self._meta(soup, 'meta[property="article:author"]')
                or self._text(soup, ".author")
            ),
            published_at=(
                self._meta(soup, 'meta[property="article:published_time"]')
                or self._meta(soup, 'meta[name="date"]')
                or self._attr(soup, "time", "datetime")
            ),
            description=(
                self._meta(soup, 'meta[name="description"]')
                or self._meta(soup, 'meta[property="og:description"]')
            ),
            keywords=keywords,
            language=language or self._meta(soup, 'meta[http-equiv="content-language"]'),
        )

    @staticmethod
    def _meta(soup: BeautifulSoup, selector: str) -> Optional[str]:
        return ContentExtractor._attr(soup, selector, "content")

    @staticmethod
    def _attr(soup: BeautifulSoup, selector: str, attribute: str) -> Optional[str]:
        element = soup.select_one(selector)
        if element is None:
            return None
        value = element.get(attribute)
        return value.strip() if value and value.strip() else None

    @staticmethod
    def _text(soup: BeautifulSoup, selector: str) -> Optional[str]:
        element = soup.select_one(selector)
        if element is None:
            return None
        return element.get_text(strip=True) or None

    @staticmethod
    def _clean_text(text: str) -> str:
        """Normalize whitespace within lines and collapse blank lines."""
        text = text.replace("\xa0", " ")
        lines = [re.sub(r"[ \t\r\f\v]+", " ", line).strip() for line in text.split("\n")]
        text = "\n".join(lines)
        text = re.sub(r"\n{3,}", "\n\n", text)
        return text.strip()


def readability_score(content: str) -> float:
    """
    Flesch Reading Ease rescaled from 0-100 into [0, 1].

    Returns 0 for content under 100 characters or with no sentences/words.
    """
    if not content or len(content) < MIN_READABLE_CHARS:
        return 0.0

    sentences = [s for s in re.split(r"[.!?]+", content) if s.strip()]
    words = content.split()

    if not sentences or not words:
        return 0.0

    avg_words_per_sentence = len(words) / len(sentences)
    avg_syllables_per_word = _average_syllables(words)

    score = 206.835 - (1.015 * avg_words_per_sentence) - (84.6 * avg_syllables_per_word)

    return max(0.0, min(1.0, score / 100))


def _average_syllables(words: List[str]) -> float:
    total = sum(count_syllables(word.lower()) for word in words)
    return total / len(words)


def count_syllables(word: str) -> int:
    """Approximate syllables by vowel groups, discounting a trailing silent e."""
    if len(word) <= 3:
        return 1

    groups = re.findall(r"[aeiouy]+", word)
    count = len(groups) if groups else 1

    if word.endswith("e"):
        count -= 1

    return max(1, count)
