"""
HTML sanitising for rich text fields.
"""
from app.core.sanitize import sanitize_html, strip_html


class TestSanitizeHtml:
    def test_keeps_basic_formatting(self):
        result = sanitize_html("<p>Hello <strong>World</strong></p>")
        assert "<p>" in result
        assert "<strong>" in result

    def test_keeps_headings_lists_and_code(self):
        result = sanitize_html("<h1>Title</h1><ul><li>One</li></ul><pre><code>x = 1</code></pre>")
        for tag in ("<h1>", "<ul>", "<li>", "<pre>", "<code>"):
            assert tag in result

    def test_keeps_tables(self):
        result = sanitize_html("<table><tr><th>Header</th></tr><tr><td>Cell</td></tr></table>")
        for tag in ("<table>", "<tr>", "<th>", "<td>"):
            assert tag in result

    def test_links_open_in_new_tab_without_opener(self):
        result = sanitize_html('<a href="https://example.com">Link</a>')
        assert 'href="https://example.com"' in result
        assert 'target="_blank"' in result
        assert 'rel="noopener noreferrer"' in result

    def test_keeps_safe_image_attributes(self):
        result = sanitize_html('<img src="https://example.com/a.jpg" alt="Flat">')
        assert 'src="https://example.com/a.jpg"' in result
        assert 'alt="Flat"' in result

    def test_removes_script_and_its_content(self):
        result = sanitize_html('<p>Safe</p><script>alert("XSS")</script>')
        assert "<script" not in result
        assert "alert" not in result
        assert "<p>Safe</p>" in result

    def test_removes_style_blocks(self):
        result = sanitize_html("<style>body { display: none; }</style><p>Content</p>")
        assert "<style" not in result
        assert "display" not in result
        assert "<p>Content</p>" in result

    def test_removes_event_handlers(self):
        assert "onerror" not in sanitize_html('<img src="https://x.test/a.png" onerror="alert(1)">')
        assert "onclick" not in sanitize_html('<p onclick="alert(1)">Click</p>')

    def test_removes_javascript_urls(self):
        assert "javascript:" not in sanitize_html('<a href="javascript:alert(1)">Click</a>')

    def test_removes_data_urls_in_links(self):
        assert "data:text/html" not in sanitize_html('<a href="data:text/html,hi">Click</a>')

    def test_removes_iframes_forms_and_svg(self):
        result = sanitize_html(
            '<iframe src="https://evil.test"></iframe>'
            '<form action="/steal"><input name="password"></form>'
            '<svg onload="alert(1)"><circle></circle></svg>'
        )
        for fragment in ("<iframe", "<form", "<input", "<svg", "onload"):
            assert fragment not in result

    def test_keeps_class_on_block_elements(self):
        assert 'class="lead"' in sanitize_html('<p class="lead">Intro</p>')

    def test_empty_input(self):
        assert sanitize_html("") == ""


class TestStripHtml:
    def test_removes_all_tags(self):
        assert strip_html("<p>Hello <b>there</b></p>") == "Hello there"

    def test_drops_script_content(self):
        assert strip_html("<script>alert(1)</script>Hi") == "Hi"

    def test_empty_input(self):
        assert strip_html("") == ""
