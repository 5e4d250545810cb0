"""
Tests for the Obsidian dialect transformer and the plain-text extractor.
"""

import unittest

from standard_site_sync.converters import (
    MappingResolver,
    NullResolver,
    ResolvedWikilink,
    WikilinkResolver,
    markdown_to_plaintext,
    transform_obsidian_markdown,
)


class RecordingResolver:
    """Resolver that records every lookup."""

    def __init__(self, links=None):
        self.links = links or {}
        self.lookups = []

    def resolve(self, target):
        self.lookups.append(target)
        return self.links.get(target)


class TestObsidianTransform(unittest.TestCase):
    """Test dialect markdown to portable markdown."""

    def transform(self, text, links=None):
        return transform_obsidian_markdown(text, MappingResolver(links or {}))

    def test_plain_markdown_unchanged(self):
        text = "# Title\n\nSome *text* with a [link](https://x.y).\n"
        self.assertEqual(self.transform(text).text, text)

    def test_block_comment_removed(self):
        result = self.transform("before\n%%\nsecret\nstuff\n%%\nafter")
        self.assertEqual(result.text, "before\n\nafter")

    def test_inline_comment_removed(self):
        result = self.transform("keep %%hidden%% this")
        self.assertEqual(result.text, "keep  this")

    def test_highlight_to_mark(self):
        result = self.transform("an ==important== word")
        self.assertEqual(result.text, "an <mark>important</mark> word")

    def test_highlight_independent_of_resolver(self):
        for resolver in (NullResolver(), MappingResolver({})):
            result = transform_obsidian_markdown("==hi==", resolver)
            self.assertEqual(result.text, "<mark>hi</mark>")
            self.assertEqual(result.references, [])

    def test_single_wikilink_exact(self):
        uri = "at://did:plc:x/site.standard.document/X"
        result = self.transform(
            "[[T]]", {"T": ResolvedWikilink(path="/p", uri=uri)}
        )
        self.assertEqual(result.text, "[T](/p)")
        self.assertEqual(result.references, [{"uri": uri}])
        self.assertEqual(result.warnings, [])

    def test_embed_removed(self):
        result = self.transform("see ![[diagram.png]] here")
        self.assertEqual(result.text, "see  here")

    def test_embed_is_not_a_link(self):
        resolver = RecordingResolver(
            {"Other": ResolvedWikilink(path="/other", uri="at://x/y/z")}
        )
        result = transform_obsidian_markdown("![[Other]]", resolver)
        self.assertEqual(result.text, "")
        self.assertEqual(result.references, [])
        self.assertEqual(resolver.lookups, [])

    def test_callout_with_title(self):
        result = self.transform("> [!note] Heads up\n> body line")
        self.assertEqual(result.text, "> **Heads up**\n> body line")

    def test_callout_without_title(self):
        result = self.transform("> [!warning]\n> careful")
        self.assertEqual(result.text, "> \n> careful")

    def test_folded_callout(self):
        result = self.transform("> [!tip]- Folded\n> inside")
        self.assertEqual(result.text, "> **Folded**\n> inside")

    def test_callout_only_at_line_start(self):
        text = "text > [!note] not a callout"
        self.assertEqual(self.transform(text).text, text)

    def test_unresolved_wikilink_becomes_text(self):
        result = self.transform("see [[Missing Note]] now")
        self.assertEqual(result.text, "see Missing Note now")
        self.assertEqual(result.references, [])
        self.assertEqual(len(result.warnings), 1)
        self.assertIn("Missing Note", result.warnings[0])

    def test_unresolved_wikilink_with_display(self):
        result = self.transform("[[Missing|shown]]")
        self.assertEqual(result.text, "shown")

    def test_unresolved_nested_target_uses_leaf(self):
        result = self.transform("[[folder/Deep Note]]")
        self.assertEqual(result.text, "Deep Note")

    def test_resolved_wikilink_without_uri(self):
        links = {"Other": ResolvedWikilink(path="/other")}
        result = self.transform("go [[Other]]", links)
        self.assertEqual(result.text, "go [Other](/other)")
        self.assertEqual(result.references, [])

    def test_resolved_wikilink_with_uri_adds_reference(self):
        uri = "at://did:plc:a/site.standard.document/r1"
        links = {"Other": ResolvedWikilink(path="/other", uri=uri)}
        result = self.transform("[[Other|the other]]", links)
        self.assertEqual(result.text, "[the other](/other)")
        self.assertEqual(result.references, [{"uri": uri}])

    def test_references_in_document_order(self):
        links = {
            "B": ResolvedWikilink(path="/b", uri="at://x/c/b"),
            "A": ResolvedWikilink(path="/a", uri="at://x/c/a"),
        }
        result = self.transform("[[A]] then [[B]] then [[A]]", links)
        self.assertEqual(
            [r["uri"] for r in result.references],
            ["at://x/c/a", "at://x/c/b", "at://x/c/a"],
        )

    def test_wikilink_inside_comment_is_dropped(self):
        resolver = RecordingResolver()
        result = transform_obsidian_markdown("a %%[[Hidden]]%% b", resolver)
        self.assertEqual(result.text, "a  b")
        self.assertEqual(resolver.lookups, [])

    def test_null_resolver(self):
        resolver = NullResolver()
        self.assertIsInstance(resolver, WikilinkResolver)
        result = transform_obsidian_markdown("[[X]]", resolver)
        self.assertEqual(result.text, "X")

    def test_combined_passes(self):
        links = {"Other": ResolvedWikilink(path="/other")}
        text = (
            "%%\ndraft note\n%%\n"
            "> [!info] Read this\n"
            "> ==key== point, see [[Other]]\n"
            "![[img.png]]"
        )
        result = self.transform(text, links)
        self.assertEqual(
            result.text,
            "\n> **Read this**\n"
            "> <mark>key</mark> point, see [Other](/other)\n",
        )


class TestMarkdownToPlaintext(unittest.TestCase):
    """Test portable markdown to plain text."""

    def test_headings(self):
        self.assertEqual(markdown_to_plaintext("# One\n## Two"), "One\nTwo")

    def test_heading_and_bold_paragraphs(self):
        self.assertEqual(markdown_to_plaintext("# H\n\n**b**"), "H\n\nb")

    def test_hash_without_space_kept(self):
        self.assertEqual(markdown_to_plaintext("#tag"), "#tag")

    def test_emphasis(self):
        self.assertEqual(
            markdown_to_plaintext("***a*** **b** *c*"), "a b c"
        )

    def test_links_and_images(self):
        self.assertEqual(
            markdown_to_plaintext("![alt](i.png) and [text](/url)"),
            "alt and text",
        )

    def test_inline_code(self):
        self.assertEqual(markdown_to_plaintext("run `ls -la`"), "run ls -la")

    def test_code_fence_keeps_body(self):
        self.assertEqual(
            markdown_to_plaintext("```python\nprint(1)\n```"), "print(1)"
        )

    def test_html_tags_removed(self):
        self.assertEqual(
            markdown_to_plaintext("a <mark>hot</mark> take"), "a hot take"
        )

    def test_list_markers(self):
        self.assertEqual(
            markdown_to_plaintext("- one\n* two\n+ three\n1. four\n  2. five"),
            "one\ntwo\nthree\nfour\nfive",
        )

    def test_blockquote(self):
        self.assertEqual(
            markdown_to_plaintext("> quoted\n>tight"), "quoted\ntight"
        )

    def test_collapses_blank_lines(self):
        self.assertEqual(markdown_to_plaintext("a\n\n\n\n\nb"), "a\n\nb")

    def test_trimmed(self):
        self.assertEqual(markdown_to_plaintext("\n\n  text  \n\n"), "text")

    def test_empty(self):
        self.assertEqual(markdown_to_plaintext(""), "")

    def test_transformed_note(self):
        links = {"Other": ResolvedWikilink(path="/other")}
        transformed = transform_obsidian_markdown(
            "# Title\n\n> [!note] Tip\n> ==see== [[Other]]",
            MappingResolver(links),
        )
        self.assertEqual(
            markdown_to_plaintext(transformed.text), "Title\n\nTip\nsee Other"
        )


if __name__ == "__main__":
    unittest.main()
