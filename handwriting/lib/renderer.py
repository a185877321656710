import io
import logging
import math
import os
import threading
from typing import Callable, List, Optional, Tuple
import numpy as np
from PIL import Image, ImageDraw
from pydantic import BaseModel
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas
from .errors import ExportTargetMissing
from .fonts import PillowFontMetrics
from .layout import LayoutEngine, Line, StyleParameters, StyledUnit


logger = logging.getLogger(__name__)

PDF_MARGIN_PT = 5
GLYPH_PADDING = 4


class Background(BaseModel):
    color: Optional[str] = "#ffffff"
    image_path: Optional[str] = None


class RasterOptions(BaseModel):
    scale: float = 2
    background: Optional[Background] = None
    width: float
    height: float
    crop_top: float = 0
    noise_level: int = 0


class ExportResult(BaseModel):
    filename: str
    media_type: str
    data: bytes
    pages: int = 1


def export_filename(name: Optional[str], extension: str, default: str) -> str:
    name = (name or "").strip() or default
    if not name.lower().endswith(extension):
        name += extension
    return name


def add_noise(image: Image.Image, noise_level: int, rng: Optional[np.random.Generator] = None) -> Image.Image:
    """Paper grain: shift every colour channel by up to ``noise_level`` either way."""
    rng = rng or np.random.default_rng()
    pixels = np.asarray(image).astype("int16")
    grain = rng.integers(-noise_level, noise_level, size=pixels.shape[:2] + (3,), endpoint=True, dtype="int16")
    pixels[..., :3] = np.clip(pixels[..., :3] + grain, 0, 255)
    return Image.fromarray(pixels.astype("uint8"))


def tile(paper: Image.Image, size: Tuple[int, int]) -> Image.Image:
    canvas_image = Image.new("RGB", size)
    for top in range(0, size[1], paper.height):
        for left in range(0, size[0], paper.width):
            canvas_image.paste(paper, (left, top))
    return canvas_image


class PillowRasterizer:
    """Draws positioned lines onto a bitmap, applying each unit's transform around its centre."""

    def __init__(self, metrics: PillowFontMetrics, font_family: str, params: StyleParameters) -> None:
        self.metrics = metrics
        self.font_family = font_family
        self.params = params

    def background(self, options: RasterOptions) -> Image.Image:
        size = (math.ceil(options.width * options.scale), math.ceil(options.height * options.scale))
        background = options.background
        if background is None or (background.color is None and background.image_path is None):
            return Image.new("RGBA", size, (0, 0, 0, 0))
        if background.image_path:
            if os.path.exists(background.image_path):
                with Image.open(background.image_path) as paper:
                    return tile(paper.convert("RGB"), size)
            logger.warning(f"Paper image {background.image_path} not found, using a plain background")
        return Image.new("RGB", size, background.color or "#ffffff")

    def rasterize(self, node: Optional[List[Line]], options: RasterOptions) -> Image.Image:
        if not node:
            raise ExportTargetMissing("Nothing to rasterize")
        image = self.background(options)
        font = self.metrics.font(self.font_family, self.params.font_size * options.scale)
        for line in node:
            for styled in line.units:
                self.draw_unit(image, font, styled, options)
        if options.noise_level and image.mode == "RGB":
            image = add_noise(image, noise_level=options.noise_level)
        return image

    def draw_unit(self, image: Image.Image, font, styled: StyledUnit, options: RasterOptions) -> None:
        if not styled.text.strip() or styled.x is None or styled.y is None:
            return
        scale = options.scale
        transform = styled.transform
        ascent, descent = font.getmetrics()
        width = math.ceil(font.getlength(styled.text)) + 2 * GLYPH_PADDING
        height = ascent + descent + 2 * GLYPH_PADDING

        glyph = Image.new("RGBA", (width, height), (0, 0, 0, 0))
        ImageDraw.Draw(glyph).text((GLYPH_PADDING, GLYPH_PADDING), styled.text, font=font, fill=self.params.color)

        if transform.scale_factor > 0 and abs(transform.scale_factor - 1) > 1e-6:
            glyph = glyph.resize(
                (max(1, round(width * transform.scale_factor)), max(1, round(height * transform.scale_factor))),
                resample=Image.BICUBIC,
            )
        if abs(transform.rotation) > 1e-6:
            # PIL rotates counter-clockwise
            glyph = glyph.rotate(-transform.rotation, expand=True, resample=Image.BICUBIC)

        # centre of the untransformed glyph box, vertically centred in the line
        line_offset = (self.params.line_height - self.params.font_size) / 2
        center_x = (styled.x + transform.dx) * scale - GLYPH_PADDING + width / 2
        center_y = (styled.y - options.crop_top + line_offset + transform.dy) * scale - GLYPH_PADDING + height / 2
        position = (round(center_x - glyph.width / 2), round(center_y - glyph.height / 2))
        image.paste(glyph, position, glyph)


def flatten(image: Image.Image, color: str = "#ffffff") -> Image.Image:
    if image.mode != "RGBA":
        return image.convert("RGB")
    flat = Image.new("RGB", image.size, color)
    flat.paste(image, mask=image.split()[-1])
    return flat


def images_to_pdf(images: List[Image.Image]) -> bytes:
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    for image in images:
        c.drawImage(
            ImageReader(flatten(image)),
            PDF_MARGIN_PT,
            PDF_MARGIN_PT,
            width=A4[0] - PDF_MARGIN_PT * 2,
            height=A4[1] - PDF_MARGIN_PT * 2,
        )
        c.showPage()
    c.save()

    buffer.seek(0)
    return buffer.getvalue()


class Exporter:
    """Runs the two export paths off the shared layout engine.

    ``busy`` stays set while any export on this instance is running, and
    ``last_output`` only ever holds a complete, successful export.
    ``progress`` drops back to 0 on failure.
    """

    def __init__(
        self,
        engine: LayoutEngine,
        metrics: PillowFontMetrics,
        scale: float = 2,
        default_name: str = "handwriting",
        noise_level: int = 0,
    ) -> None:
        self.engine = engine
        self.metrics = metrics
        self.scale = scale
        self.default_name = default_name
        self.noise_level = noise_level
        self.progress = 0
        self.last_output: Optional[ExportResult] = None
        self._lock = threading.Lock()
        self._active = 0

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._active > 0

    def _set_progress(self, value: int) -> None:
        with self._lock:
            self.progress = value

    def _run(self, job: Callable[[], ExportResult]) -> ExportResult:
        with self._lock:
            self._active += 1
            self.progress = 0
        result = None
        try:
            result = job()
        except Exception as e:
            logger.error(f"Export failed: {e}")
            raise
        finally:
            with self._lock:
                self._active -= 1
                if result is None:
                    self.progress = 0
                else:
                    self.progress = 100
                    self.last_output = result
        return result

    def _options(self, width: float, height: float, background: Optional[Background], crop_top: float = 0) -> RasterOptions:
        return RasterOptions(
            scale=self.scale,
            background=background,
            width=width,
            height=height,
            crop_top=crop_top,
            noise_level=self.noise_level,
        )

    def render_image(self, text: str, params: StyleParameters, font_id: str, background: Optional[Background]) -> Image.Image:
        """The whole wrapped text on one page-wide bitmap, no page breaks."""
        page_model = self.engine.page_model
        lines = self.engine.wrap(text, params, font_id)
        height = page_model.top_margin + len(lines) * params.line_height + page_model.bottom_margin
        rasterizer = PillowRasterizer(self.metrics, font_id, params)
        return rasterizer.rasterize(lines, self._options(page_model.width, height, background))

    def render_pages(self, text: str, params: StyleParameters, font_id: str, background: Optional[Background]) -> List[Image.Image]:
        layout = self.engine.layout(text, params, font_id)
        pages = layout.export.pages
        if not pages:
            raise ExportTargetMissing("Layout produced no pages")
        page_model = layout.export.page_model
        rasterizer = PillowRasterizer(self.metrics, font_id, params)
        images = []
        for page in pages:
            options = self._options(page_model.width, page_model.height, background, crop_top=page.index * page_model.height)
            images.append(rasterizer.rasterize(page.lines, options))
            self._set_progress(int(100 * (page.index + 1) / len(pages)))
        return images

    def render_page(
        self, text: str, params: StyleParameters, font_id: str, background: Optional[Background], page_index: int
    ) -> Image.Image:
        layout = self.engine.layout(text, params, font_id)
        pages = layout.export.pages
        if not 0 <= page_index < len(pages):
            raise ExportTargetMissing(f"Page {page_index} does not exist, layout has {len(pages)} pages")
        page_model = layout.export.page_model
        rasterizer = PillowRasterizer(self.metrics, font_id, params)
        options = self._options(page_model.width, page_model.height, background, crop_top=page_index * page_model.height)
        return rasterizer.rasterize(pages[page_index].lines, options)

    def export_image(
        self,
        text: str,
        params: StyleParameters,
        font_id: str,
        background: Optional[Background] = None,
        filename: Optional[str] = None,
    ) -> ExportResult:
        def job() -> ExportResult:
            image = self.render_image(text, params, font_id, background)
            with io.BytesIO() as output:
                image.save(output, format="PNG")
                data = output.getvalue()
            return ExportResult(
                filename=export_filename(filename, ".png", self.default_name),
                media_type="image/png",
                data=data,
            )

        return self._run(job)

    def export_pdf(
        self,
        text: str,
        params: StyleParameters,
        font_id: str,
        background: Optional[Background] = None,
        filename: Optional[str] = None,
    ) -> ExportResult:
        def job() -> ExportResult:
            images = self.render_pages(text, params, font_id, background)
            return ExportResult(
                filename=export_filename(filename, ".pdf", self.default_name),
                media_type="application/pdf",
                data=images_to_pdf(images),
                pages=len(images),
            )

        return self._run(job)
