"""
Unit Tests for Content Extraction
"""

from honig.pipeline.extractor import ContentExtractor, count_syllables, readability_score


SENTENCE = "The quick brown fox jumps over the lazy dog near the river bank. "


class TestTitleExtraction:
    """Tests for title selection order."""

    def test_social_meta_beats_title_tag(self):
        """Test og:title wins over <title> and <h1>."""
        html = """
        <html><head><title>Foo</title>
        <meta property="og:title" content="Bar"></head>
        <body><h1>Heading</h1><p>text</p></body></html>
        """

        article = ContentExtractor().extract(html, "https://example.com/a")

        assert article.title == "Bar"

    def test_heading_beats_title_tag(self):
        """Test first heading is used when no social meta exists."""
        html = "<html><head><title>Foo</title></head><body><h1>Heading</h1></body></html>"

        article = ContentExtractor().extract(html)

        assert article.title == "Heading"

    def test_default_untitled(self):
        """Test pages without any title source."""
        article = ContentExtractor().extract("<html><body><p>x</p></body></html>")

        assert article.title == "Untitled"


class TestBodyExtraction:
    """Tests for body text selection."""

    def test_content_container_preferred(self):
        """Test an <article> with enough text is used as the body."""
        body = SENTENCE * 5
        html = f"<html><body><article><p>{body}</p></article><p>outside</p></body></html>"

        article = ContentExtractor().extract(html)

        assert "quick brown fox" in article.body_text
        assert "outside" not in article.body_text

    def test_short_container_falls_back_to_paragraphs(self):
        """Test containers under 200 characters are skipped."""
        html = "<html><body><article>tiny</article><p>First para.</p><p>Second para.</p></body></html>"

        article = ContentExtractor().extract(html)

        assert article.body_text == "First para.\n\nSecond para."

    def test_paragraph_only_page(self):
        """Test a 600-character paragraph-only page."""
        para = ("Readable prose makes a page easy to follow. " * 2)[:60]
        html = "<html><body>" + "".join(f"<div><p>{para}</p></div>" for _ in range(10)) + "</body></html>"

        article = ContentExtractor().extract(html)

        assert len(article.body_text.split("\n\n")) == 10
        assert 550 <= len(article.body_text) <= 640
        assert 0.0 < article.readability_score <= 1.0

    def test_noise_removed(self):
        """Test navigation, scripts and footers are dropped before reading."""
        html = """
        <html><body>
        <nav>Home About</nav>
        <script>var x = 1;</script>
        <p>Real content here.</p>
        <footer>Copyright</footer>
        </body></html>
        """

        article = ContentExtractor().extract(html)

        assert article.body_text == "Real content here."

    def test_whitespace_normalized(self):
        """Test runs of spaces and blank lines are collapsed."""
        body = "Line   one\n\n\n\n\nLine    two " + "padding " * 40
        html = f"<html><body><main>{body}</main></body></html>"

        article = ContentExtractor().extract(html)

        assert "Line one\n\nLine two" in article.body_text


class TestMetadataExtraction:
    """Tests for meta tag fallback chains."""

    def test_meta_fields(self):
        """Test author, date, description, keywords and language."""
        html = """
        <html lang="en"><head>
        <meta name="author" content="Ada Lovelace">
        <meta property="article:published_time" content="2024-01-02">
        <meta name="description" content="A page">
        <meta name="keywords" content="one, two ,three">
        </head><body><p>x</p></body></html>
        """

        metadata = ContentExtractor().extract(html).metadata

        assert metadata.author == "Ada Lovelace"
        assert metadata.published_at == "2024-01-02"
        assert metadata.description == "A page"
        assert metadata.keywords == ["one", "two", "three"]
        assert metadata.language == "en"

    def test_missing_metadata(self):
        """Test absent meta tags produce empty fields."""
        metadata = ContentExtractor().extract("<html><body><p>x</p></body></html>").metadata

        assert metadata.author is None
        assert metadata.keywords == []


class TestReadability:
    """Tests for the readability score."""

    def test_short_content_scores_zero(self):
        """Test content under 100 characters."""
        assert readability_score("Short text. Very short.") == 0.0

    def test_score_in_range(self):
        """Test scores are clamped to [0, 1]."""
        simple = "I see a cat. The cat is big. " * 10
        dense = "Internationalization necessitates comprehensive organizational reconsideration " * 5

        assert 0.0 <= readability_score(simple) <= 1.0
        assert readability_score(dense) == 0.0
        assert readability_score(simple) > 0.5

    def test_no_sentences(self):
        """Test punctuation-only content."""
        assert readability_score("." * 150) == 0.0

    def test_syllables(self):
        """Test the vowel-group syllable heuristic."""
        assert count_syllables("the") == 1
        assert count_syllables("make") == 1
        assert count_syllables("reading") == 2
        assert count_syllables("computer") == 3
