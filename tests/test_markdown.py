import unittest

from handwriting.lib.layout import remove_markdown


class TestRemoveMarkdown(unittest.TestCase):
    def test_headings_and_emphasis(self):
        text = "# Title\n\nSome **bold** and *italic* text."
        self.assertEqual(remove_markdown(text), "Title\n\nSome bold and italic text.")

    def test_underscore_emphasis(self):
        self.assertEqual(remove_markdown("___all___ __bold__ _it_"), "all bold it")

    def test_links_keep_text_images_drop_everything(self):
        text = "See [docs](http://example.com) and ![logo](img.png) here"
        self.assertEqual(remove_markdown(text), "See docs and  here")

    def test_reference_links(self):
        self.assertEqual(remove_markdown("Read [the guide][1]"), "Read the guide")

    def test_code_blocks_and_inline_code(self):
        text = "before\n```\ncode\n```\nafter `x`"
        self.assertEqual(remove_markdown(text), "before\n\nafter x")

    def test_quotes_and_lists(self):
        text = "> quoted\n- item\n* star\n1. first"
        self.assertEqual(remove_markdown(text), "quoted\nitem\nstar\nfirst")

    def test_tables_are_removed(self):
        text = "| a | b |\n|---|---|\nafter"
        self.assertEqual(remove_markdown(text), "after")

    def test_horizontal_rule(self):
        for rule in ("---", "___", "***", "-----"):
            self.assertEqual(remove_markdown(f"above\n\n{rule}\n\nbelow"), "above\n\nbelow", rule)

    def test_bare_markers_do_not_join_lines(self):
        self.assertEqual(remove_markdown("-\nnext"), "-\nnext")
        self.assertEqual(remove_markdown("#\nTitle"), "#\nTitle")
        self.assertEqual(remove_markdown(">\nquote"), ">\nquote")

    def test_strikethrough_superscript_subscript(self):
        self.assertEqual(remove_markdown("~~gone~~ kept H~2~O x^2^"), "gone kept H2O x2")

    def test_blank_runs_and_trailing_whitespace(self):
        self.assertEqual(remove_markdown("a   \n\n\n\n\nb\t"), "a\n\nb")

    def test_plain_text_is_untouched(self):
        text = "手写字体模拟器\n\n这是一个模拟手写效果的在线工具。"
        self.assertEqual(remove_markdown(text), text)

    def test_idempotent(self):
        samples = [
            "1. 2. nested numbers",
            "> > nested quote",
            "# # double heading",
            "- - nested list",
            "***x*** **y** *z* `c` [l](u) ![i](u)",
            "| t |\n|---|\n\n\n\n~~s~~ ^p^ ~b~",
            "**unclosed *mixed __markers_",
            "a\n\n\n\n\n\nb   ",
        ]
        for sample in samples:
            once = remove_markdown(sample)
            self.assertEqual(remove_markdown(once), once, sample)


if __name__ == "__main__":
    unittest.main()
