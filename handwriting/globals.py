from .config import *
from .lib.database import RedisParamsStore
from .lib.fonts import FontRegistry, PillowFontMetrics, load_catalog
from .lib.layout import LayoutEngine, PageModel
from .lib.renderer import Exporter

import redis
import logging


export_page = PageModel(
    width=PAGE_WIDTH,
    height=PAGE_HEIGHT,
    horizontal_padding=PAGE_PADDING,
    top_margin=PAGE_PADDING,
    bottom_margin=PAGE_PADDING,
)
preview_page = PageModel(
    width=PAGE_WIDTH,
    height=PREVIEW_PAGE_HEIGHT,
    top_margin=PREVIEW_MARGIN_TOP,
    bottom_margin=PREVIEW_MARGIN_BOTTOM,
)

font_registry = FontRegistry(load_catalog(FONT_DIR), retries=FONT_LOAD_RETRIES)
font_registry.load_all()
font_metrics = PillowFontMetrics(font_registry)

layout_engine = LayoutEngine(
    metrics=font_metrics,
    fonts=font_registry,
    page_model=export_page,
    preview_model=preview_page,
    max_chars=MAX_INPUT_CHARS,
)
exporter = Exporter(
    layout_engine,
    font_metrics,
    scale=EXPORT_SCALE,
    default_name=DEFAULT_EXPORT_NAME,
    noise_level=NOISE_LEVEL,
)

try:
    params_store = RedisParamsStore(redis.from_url(REDIS_URL), key=PARAMS_KEY)
except Exception:
    logging.info("Fix redis connection")
    params_store = RedisParamsStore(None, key=PARAMS_KEY)
