import logging
import math
from typing import List, Optional, Protocol, Tuple
from .jitter import JitterGenerator
from .models import (
    BuiltLine,
    Line,
    Page,
    PageDivider,
    PageModel,
    StyleParameters,
    StyledUnit,
    UnitKind,
)


logger = logging.getLogger(__name__)


class FontMetrics(Protocol):
    def measure_advance(self, text: str, font_family: str, font_size: float) -> float:
        ...


class _OpenLine:
    def __init__(self, source_line_index: int, is_empty: bool = False, is_continuation: bool = False) -> None:
        self.source_line_index = source_line_index
        self.is_empty = is_empty
        self.is_continuation = is_continuation
        self.units: List[Tuple[StyledUnit, float]] = []
        self.width = 0.0

    def append(self, styled: StyledUnit, glyph_width: float) -> None:
        transform = styled.transform
        self.units.append((styled, glyph_width))
        self.width += transform.margin_left + glyph_width + transform.margin_right


def flow_dividers(content_height: float, page_model: PageModel) -> List[PageDivider]:
    """Gutter bands for the live preview, one after every page the content reaches.

    Each band covers the bottom margin of a page and ends at the page edge.
    Nothing is split; the bands are drawn over the flowing content.
    """
    page_height = page_model.height
    pages = max(1, math.ceil(content_height / page_height))
    return [
        PageDivider(
            start=(index + 1) * page_height - page_model.bottom_margin,
            end=(index + 1) * page_height,
        )
        for index in range(pages)
    ]


class Paginator:
    """Greedy width-aware line wrapping plus page assignment for export."""

    def __init__(
        self,
        page_model: PageModel,
        metrics: FontMetrics,
        font_family: str,
        params: StyleParameters,
        jitter: Optional[JitterGenerator] = None,
    ) -> None:
        self.page_model = page_model
        self.metrics = metrics
        self.font_family = font_family
        self.params = params
        self.jitter = jitter or JitterGenerator()

    @property
    def line_height(self) -> float:
        return self.params.line_height

    def paginate(self, lines: List[BuiltLine]) -> List[Page]:
        if self.line_height > self.page_model.usable_height:
            raise ValueError(
                f"Line height {self.line_height} does not fit in a page with {self.page_model.usable_height} usable height"
            )
        pages = self._assign(lines, self.page_model.budget - self.page_model.bottom_margin)
        logger.info(f"Paginated {len(lines)} source lines into {len(pages)} pages")
        return [self._finalize_page(index, page) for index, page in enumerate(pages)]

    def wrap(self, lines: List[BuiltLine]) -> List[Line]:
        """Wrap to the page width without any page budget."""
        pages = self._assign(lines, math.inf)
        return self._finalize_page(0, pages[0]).lines

    def _assign(self, lines: List[BuiltLine], limit: float) -> List[List[_OpenLine]]:
        max_width = self.page_model.usable_width
        line_height = self.line_height
        pages: List[List[_OpenLine]] = [[]]
        current_page_height = self.page_model.top_margin
        previous: Optional[_OpenLine] = None

        def place(open_line: _OpenLine) -> None:
            nonlocal current_page_height, previous
            if limit - current_page_height < line_height and pages[-1]:
                pages.append([])
                current_page_height = self.page_model.top_margin
            pages[-1].append(open_line)
            current_page_height += line_height
            previous = open_line

        for built in lines:
            current = _OpenLine(built.line_index, is_empty=built.is_empty)
            for unit in built.units:
                styled = self.jitter.style(unit, self.params)
                glyph_width = self.metrics.measure_advance(unit.text, self.font_family, self.params.font_size)
                transform = styled.transform
                advance = transform.margin_left + glyph_width + transform.margin_right

                if current.units and current.width + advance > max_width:
                    place(current)
                    current = _OpenLine(built.line_index, is_continuation=True)

                # A symbol that would open a wrapped line hangs on the previous one instead.
                if (
                    unit.kind == UnitKind.SYMBOL
                    and current.is_continuation
                    and not current.units
                    and previous is not None
                    and previous.units
                    and current_page_height + line_height <= limit
                ):
                    previous.append(styled, glyph_width)
                    continue

                current.append(styled, glyph_width)
            if current.units or not current.is_continuation:
                place(current)

        return pages

    def _finalize_page(self, page_index: int, open_lines: List[_OpenLine]) -> Page:
        model = self.page_model
        line_height = self.line_height
        lines = []
        for index_in_page, open_line in enumerate(open_lines):
            y = index_in_page * line_height + model.top_margin + page_index * model.height
            x = model.horizontal_padding
            units = []
            for styled, glyph_width in open_line.units:
                x += styled.transform.margin_left
                units.append(styled.model_copy(update={"advance": glyph_width, "x": x, "y": y}))
                x += glyph_width + styled.transform.margin_right
            lines.append(
                Line(
                    source_line_index=open_line.source_line_index,
                    units=units,
                    min_height=line_height if open_line.is_empty else None,
                    height=line_height,
                    width=open_line.width,
                    index_in_page=index_in_page,
                    is_continuation=open_line.is_continuation,
                )
            )
        height = model.top_margin + len(lines) * line_height + model.bottom_margin
        return Page(index=page_index, lines=lines, height=height)
