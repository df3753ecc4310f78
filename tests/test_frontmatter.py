"""Tests for dura.importer.frontmatter."""

from dura.importer.frontmatter import (
    parse_front_matter,
    parse_inline_array,
    split_front_matter,
    unquote,
)


class TestSplitFrontMatter:
    def test_yaml_block(self):
        fields, body = split_front_matter("---\ntitle: Hello\ntags: [a, b]\n---\n\nBody")
        assert fields == {"title": "Hello", "tags": ["a", "b"]}
        assert body == "Body"

    def test_no_front_matter(self):
        text = "Just text\n---\nmore"
        assert split_front_matter(text) == (None, text)

    def test_unterminated(self):
        text = "---\ntitle: x\nno closing line"
        assert split_front_matter(text) == (None, text)

    def test_empty_block(self):
        fields, body = split_front_matter("---\n---\nBody")
        assert fields == {}
        assert body == "Body"

    def test_crlf(self):
        fields, body = split_front_matter("---\r\ntitle: Win\r\n---\r\nBody")
        assert fields == {"title": "Win"}
        assert body == "Body"

    def test_quoted_colon_in_value(self):
        block = '---\ntitle: He said "hi": ok\ntags: ["a","b"]\n---\nBody'
        fields, body = split_front_matter(block)
        assert fields == {"title": 'He said "hi": ok', "tags": ["a", "b"]}
        assert body == "Body"

    def test_hash_in_value_is_kept(self):
        fields, _ = split_front_matter("---\ntitle: Issue #42 fixed\n---\nBody")
        assert fields == {"title": "Issue #42 fixed"}

    def test_plain_scalars_stay_strings(self):
        fields, _ = split_front_matter("---\nnotebook: No\ndraft: yes\ncode: 010\n---\n")
        assert fields == {"notebook": "No", "draft": "yes", "code": "010"}

    def test_block_style_list(self):
        fields, _ = split_front_matter("---\ntitle: T\ntags:\n  - a\n  - on\n---\n")
        assert fields == {"title": "T", "tags": ["a", "on"]}


class TestParseFrontMatter:
    def test_known_fields(self):
        text = (
            "---\n"
            "title: Clip\n"
            "url: https://example.com/a\n"
            "source: web\n"
            "tags: [news, tech]\n"
            "notebook: 2024\n"
            "excerpt: Short\n"
            "featured_image: https://example.com/i.png\n"
            "author: Someone\n"
            "---\n"
            "Body"
        )
        fm, body = parse_front_matter(text)
        assert fm.title == "Clip"
        assert fm.url == "https://example.com/a"
        assert fm.is_web_clip
        assert fm.tags == ["news", "tech"]
        assert fm.notebook == "2024"
        assert fm.excerpt == "Short"
        assert fm.featured_image == "https://example.com/i.png"
        assert fm.extra == {"author": "Someone"}
        assert body == "Body"

    def test_tags_absent_is_none(self):
        fm, _ = parse_front_matter("---\ntitle: x\n---\n")
        assert fm.tags is None

    def test_empty_tags_list(self):
        fm, _ = parse_front_matter("---\ntags: []\n---\n")
        assert fm.tags == []

    def test_comma_string_tags(self):
        fm, _ = parse_front_matter("---\ntags: a, b\n---\n")
        assert fm.tags == ["a", "b"]

    def test_duplicate_tags_kept(self):
        fm, _ = parse_front_matter("---\ntags: [a, a]\n---\n")
        assert fm.tags == ["a", "a"]

    def test_not_web_clip(self):
        fm, _ = parse_front_matter("---\nsource: book\n---\n")
        assert not fm.is_web_clip


class TestLineHelpers:
    def test_unquote_double(self):
        assert unquote('"say \\"hi\\""') == 'say "hi"'

    def test_unquote_backslash(self):
        assert unquote('"C:\\\\dir"') == "C:\\dir"

    def test_unquote_single(self):
        assert unquote("'x'") == "x"

    def test_unquote_plain(self):
        assert unquote("plain") == "plain"

    def test_inline_array(self):
        assert parse_inline_array('["a", b ,"c"]') == ["a", "b", "c"]

    def test_empty_inline_array(self):
        assert parse_inline_array("[ ]") == []
