from typing import List
from .models import RenderUnit, UnitKind


SYMBOLS = frozenset(
    [
        "，", "。", "！", "？", "：", "；",
        "＇", "＂", "'", '"', "‘", "’", "“", "”",
        "「", "」", "『", "』",
        "（", "）", "【", "】",
        "《", "》", "〈", "〉",
        "…", "—", "·",
    ]
)


def is_word_char(char: str) -> bool:
    return ("a" <= char <= "z") or ("A" <= char <= "Z")


def classify(text: str) -> UnitKind:
    if text and all(is_word_char(char) for char in text):
        return UnitKind.WORD
    if text in SYMBOLS:
        return UnitKind.SYMBOL
    return UnitKind.PLAIN


def split_units(line: str) -> List[str]:
    """Split a line into unit texts: Latin letter runs stay together, every other character stands alone."""
    pieces = []
    word = ""
    for char in line:
        if is_word_char(char):
            word += char
            continue
        if word:
            pieces.append(word)
            word = ""
        pieces.append(char)
    if word:
        pieces.append(word)
    return pieces


def tokenize(line: str, line_index: int = 0) -> List[RenderUnit]:
    return [
        RenderUnit(text=text, kind=classify(text), line_index=line_index, ordinal=ordinal)
        for ordinal, text in enumerate(split_units(line))
    ]
