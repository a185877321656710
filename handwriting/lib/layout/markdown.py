import re


# Applied in order; later rules see the output of earlier ones.
RULES = [
    # headings
    (re.compile(r"^#{1,6}[ \t]+", re.MULTILINE), ""),
    # bold / italic
    (re.compile(r"\*\*\*(.*?)\*\*\*"), r"\1"),
    (re.compile(r"\*\*(.*?)\*\*"), r"\1"),
    (re.compile(r"\*([^*\n]+)\*"), r"\1"),
    (re.compile(r"_{3}(.*?)_{3}"), r"\1"),
    (re.compile(r"_{2}(.*?)_{2}"), r"\1"),
    (re.compile(r"_([^_\n]+)_"), r"\1"),
    # code
    (re.compile(r"```[\s\S]*?```"), ""),
    (re.compile(r"`([^`]+)`"), r"\1"),
    # images before links, otherwise the link rule eats the image brackets
    (re.compile(r"!\[([^\]]*)\]\(([^)]+)\)"), ""),
    (re.compile(r"\[([^\]]+)\]\(([^)]+)\)"), r"\1"),
    (re.compile(r"\[([^\]]+)\]\[([^\]]+)\]"), r"\1"),
    # blockquotes
    (re.compile(r"^>[ \t]+", re.MULTILINE), ""),
    # lists
    (re.compile(r"^[-*+][ \t]+", re.MULTILINE), ""),
    (re.compile(r"^\d+\.[ \t]+", re.MULTILINE), ""),
    # horizontal rules
    (re.compile(r"^[-*_]{3,}[ \t]*$", re.MULTILINE), ""),
    # tables
    (re.compile(r"\|.*\|"), ""),
    (re.compile(r"^[-:| ]*\|[-:| ]*$", re.MULTILINE), ""),
    # strikethrough
    (re.compile(r"~~(.*?)~~"), r"\1"),
    # superscript / subscript
    (re.compile(r"\^([^^]+)\^"), r"\1"),
    (re.compile(r"~([^~]+)~"), r"\1"),
    # blank line runs
    (re.compile(r"\n{3,}"), "\n\n"),
    (re.compile(r"[ \t]+$", re.MULTILINE), ""),
]


def _strip_once(text: str) -> str:
    for pattern, replacement in RULES:
        text = pattern.sub(replacement, text)
    return text.strip()


def remove_markdown(text: str) -> str:
    """Remove lightweight markup, keeping the readable text.

    The rule chain is repeated until nothing changes. Every rule only deletes
    characters, so the loop ends, and the result is a fixed point: stripping
    it again returns it unchanged.
    """
    while True:
        cleaned = _strip_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned
