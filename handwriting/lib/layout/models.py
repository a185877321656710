import math
import re
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


HEX_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")


class StyleParameters(BaseModel):
    """Styling knobs for one render pass.

    Field names are snake_case in Python and camelCase on the wire, so a blob
    saved by the browser client (``charSpacing``, ``fontSize``...) loads as is.
    Instances are frozen; edit with ``model_copy(update=...)``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    char_spacing: float = 1
    size_variation: float = 0
    line_spacing: float = 0
    horizontal_offset: float = 0
    vertical_offset: float = 0
    rotation_offset: float = 0
    color: str = "#000000"
    symbol_spacing_adjustment: float = -0.5
    remove_markdown: bool = False
    font_size: float = 22
    vertical_spacing: float = 1.4
    indent_first_line: bool = True
    prevent_symbol_at_all_line_starts: bool = True
    indent_empty_line: bool = False

    @field_validator(
        "char_spacing",
        "size_variation",
        "line_spacing",
        "horizontal_offset",
        "vertical_offset",
        "rotation_offset",
        "symbol_spacing_adjustment",
        "font_size",
        "vertical_spacing",
    )
    @classmethod
    def must_be_finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("must be a finite number")
        return value

    @field_validator("font_size")
    @classmethod
    def font_size_positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("fontSize must be greater than 0")
        return value

    @field_validator("vertical_spacing")
    @classmethod
    def vertical_spacing_at_least_one(cls, value: float) -> float:
        if value < 1:
            raise ValueError("verticalSpacing must be at least 1")
        return value

    @field_validator("color")
    @classmethod
    def color_is_hex(cls, value: str) -> str:
        if not HEX_COLOR_RE.match(value):
            raise ValueError("color must be a #RRGGBB hex string")
        return value

    @property
    def line_height(self) -> float:
        return self.font_size * self.vertical_spacing


class UnitKind(str, Enum):
    WORD = "word"
    SYMBOL = "symbol"
    PLAIN = "plain"


class FontStatus(str, Enum):
    LOADED = "loaded"
    FAILED = "failed"
    PENDING = "pending"


class RenderUnit(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    kind: UnitKind
    line_index: int = 0
    ordinal: int = 0


class Transform(BaseModel):
    model_config = ConfigDict(frozen=True)

    scale_factor: float = 1
    rotation: float = 0  # degrees, clockwise
    dx: float = 0
    dy: float = 0
    margin_left: float = 0
    margin_right: float = 0


class StyledUnit(BaseModel):
    model_config = ConfigDict(frozen=True)

    unit: RenderUnit
    transform: Transform
    advance: Optional[float] = None
    x: Optional[float] = None
    y: Optional[float] = None

    @property
    def text(self) -> str:
        return self.unit.text


class BuiltLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    line_index: int
    units: List[RenderUnit]
    is_empty: bool = False


class Line(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_line_index: int
    units: List[StyledUnit] = Field(default_factory=list)
    min_height: Optional[float] = None
    margin_bottom: float = 0
    height: Optional[float] = None
    width: Optional[float] = None
    index_in_page: Optional[int] = None
    is_continuation: bool = False

    @property
    def text(self) -> str:
        return "".join(styled.text for styled in self.units)


class Page(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    lines: List[Line] = Field(default_factory=list)
    height: float = 0


class PageModel(BaseModel):
    """Page geometry in pixels.

    ``content_height`` is the budget the paginator fills; it defaults to the
    full page height.
    """

    model_config = ConfigDict(frozen=True)

    width: float
    height: float
    horizontal_padding: float = 0
    top_margin: float = 0
    bottom_margin: float = 0
    content_height: Optional[float] = None

    @model_validator(mode="after")
    def check_geometry(self) -> "PageModel":
        if self.width <= 0 or self.height <= 0:
            raise ValueError("page width and height must be positive")
        if self.usable_width <= 0:
            raise ValueError("horizontal padding leaves no room for text")
        if self.usable_height <= 0:
            raise ValueError("top and bottom margins leave no room for text")
        return self

    @property
    def budget(self) -> float:
        return self.content_height if self.content_height is not None else self.height

    @property
    def usable_width(self) -> float:
        return self.width - 2 * self.horizontal_padding

    @property
    def usable_height(self) -> float:
        return self.budget - self.top_margin - self.bottom_margin


class PageDivider(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: float
    end: float


class FlowTree(BaseModel):
    model_config = ConfigDict(frozen=True)

    lines: List[Line] = Field(default_factory=list)
    dividers: List[PageDivider] = Field(default_factory=list)
    content_height: float = 0


class ExportLayout(BaseModel):
    model_config = ConfigDict(frozen=True)

    pages: List[Page] = Field(default_factory=list)
    line_height: float
    page_model: PageModel


class LayoutResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    preview: FlowTree
    export: Optional[ExportLayout] = None
    truncated: bool = False
