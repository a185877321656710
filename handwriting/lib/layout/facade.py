import logging
from typing import List, Optional, Protocol, Tuple
from ..errors import FontNotReady, FontUnavailable
from .jitter import JitterGenerator
from .line_builder import build_lines
from .markdown import remove_markdown
from .models import (
    BuiltLine,
    ExportLayout,
    FlowTree,
    FontStatus,
    LayoutResult,
    Line,
    PageModel,
    StyleParameters,
)
from .paginator import FontMetrics, Paginator, flow_dividers


logger = logging.getLogger(__name__)

MAX_INPUT_CHARS = 5000

EXPORT_PAGE = PageModel(width=1190, height=1684, horizontal_padding=80, top_margin=80, bottom_margin=80)
PREVIEW_PAGE = PageModel(width=1190, height=1000, top_margin=20, bottom_margin=20)


class FontStatusProvider(Protocol):
    def status(self, font_id: str) -> FontStatus:
        ...


class LayoutEngine:
    """Single entry point shared by the live preview and both exports."""

    def __init__(
        self,
        metrics: FontMetrics,
        fonts: FontStatusProvider,
        page_model: PageModel = EXPORT_PAGE,
        preview_model: PageModel = PREVIEW_PAGE,
        max_chars: int = MAX_INPUT_CHARS,
        jitter: Optional[JitterGenerator] = None,
    ) -> None:
        self.metrics = metrics
        self.fonts = fonts
        self.page_model = page_model
        self.preview_model = preview_model
        self.max_chars = max_chars
        self.jitter = jitter or JitterGenerator()

    def prepare(self, text: str, params: StyleParameters) -> Tuple[str, bool]:
        truncated = len(text) > self.max_chars
        if truncated:
            logger.info(f"Input of {len(text)} characters truncated to {self.max_chars}")
            text = text[: self.max_chars]
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        if params.remove_markdown:
            text = remove_markdown(text)
        return text, truncated

    def build(self, text: str, params: StyleParameters) -> Tuple[List[BuiltLine], bool]:
        prepared, truncated = self.prepare(text, params)
        return build_lines(prepared, params), truncated

    def require_ready(self, font_id: str) -> None:
        status = self.fonts.status(font_id)
        if status == FontStatus.FAILED:
            raise FontUnavailable(font_id)
        if status != FontStatus.LOADED:
            raise FontNotReady(font_id)

    def flow(self, lines: List[BuiltLine], params: StyleParameters) -> FlowTree:
        line_height = params.line_height
        margin_bottom = params.line_spacing * 10
        flow_lines = [
            Line(
                source_line_index=built.line_index,
                units=[self.jitter.style(unit, params) for unit in built.units],
                min_height=line_height if built.is_empty else None,
                margin_bottom=margin_bottom,
            )
            for built in lines
        ]
        content_height = len(flow_lines) * (line_height + margin_bottom)
        return FlowTree(
            lines=flow_lines,
            dividers=flow_dividers(content_height, self.preview_model),
            content_height=content_height,
        )

    def paginator(self, params: StyleParameters, font_id: str, page_model: Optional[PageModel] = None) -> Paginator:
        self.require_ready(font_id)
        return Paginator(page_model or self.page_model, self.metrics, font_id, params, self.jitter)

    def preview(self, text: str, params: StyleParameters) -> LayoutResult:
        lines, truncated = self.build(text, params)
        return LayoutResult(preview=self.flow(lines, params), truncated=truncated)

    def layout(
        self,
        text: str,
        params: StyleParameters,
        font_id: str,
        page_model: Optional[PageModel] = None,
    ) -> LayoutResult:
        lines, truncated = self.build(text, params)
        preview = self.flow(lines, params)
        paginator = self.paginator(params, font_id, page_model)
        export = ExportLayout(
            pages=paginator.paginate(lines),
            line_height=params.line_height,
            page_model=paginator.page_model,
        )
        return LayoutResult(preview=preview, export=export, truncated=truncated)

    def wrap(
        self,
        text: str,
        params: StyleParameters,
        font_id: str,
        page_model: Optional[PageModel] = None,
    ) -> List[Line]:
        lines, _ = self.build(text, params)
        return self.paginator(params, font_id, page_model).wrap(lines)
