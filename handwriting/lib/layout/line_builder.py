from typing import List
from .models import BuiltLine, StyleParameters, UnitKind
from .tokenizer import tokenize


# Two ideographic spaces, roughly two CJK glyphs wide.
INDENT = "　　"


def build_line(line: str, line_index: int, params: StyleParameters) -> BuiltLine:
    is_empty = line.strip() == ""
    if is_empty:
        text = INDENT if params.indent_empty_line else ""
    elif params.indent_first_line:
        text = INDENT + line
    else:
        text = line

    units = tokenize(text, line_index)
    # Only the first unit of the logical line is checked; lines produced by
    # width wrapping later are not.
    if params.prevent_symbol_at_all_line_starts and units and units[0].kind == UnitKind.SYMBOL:
        units = units[1:]

    return BuiltLine(line_index=line_index, units=units, is_empty=is_empty)


def build_lines(text: str, params: StyleParameters) -> List[BuiltLine]:
    return [build_line(line, index, params) for index, line in enumerate(text.split("\n"))]
