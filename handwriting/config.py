import os
from dotenv import load_dotenv


load_dotenv()


REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379")
PARAMS_KEY = os.getenv("PARAMS_KEY", "handwritingParams")

FONT_DIR = os.getenv("FONT_DIR", os.path.join(os.path.dirname(os.path.abspath(__file__)), "fonts"))
DEFAULT_FONT = os.getenv("DEFAULT_FONT", "menglixinghe")
FONT_LOAD_RETRIES = int(os.getenv("FONT_LOAD_RETRIES", 3))

MAX_INPUT_CHARS = int(os.getenv("MAX_INPUT_CHARS", 5000))
EXPORT_SCALE = float(os.getenv("EXPORT_SCALE", 2))
NOISE_LEVEL = int(os.getenv("NOISE_LEVEL", 0))
DEFAULT_EXPORT_NAME = os.getenv("DEFAULT_EXPORT_NAME", "手写文本")

# A4 at 144 dpi
PAGE_WIDTH = int(os.getenv("PAGE_WIDTH", 595 * 2))
PAGE_HEIGHT = int(os.getenv("PAGE_HEIGHT", 842 * 2))
PAGE_PADDING = int(os.getenv("PAGE_PADDING", 40 * 2))

PREVIEW_PAGE_HEIGHT = int(os.getenv("PREVIEW_PAGE_HEIGHT", 1000))
PREVIEW_MARGIN_TOP = int(os.getenv("PREVIEW_MARGIN_TOP", 20))
PREVIEW_MARGIN_BOTTOM = int(os.getenv("PREVIEW_MARGIN_BOTTOM", 20))

PAPER_STYLES = {
    "blank": {"color": "#ffffff"},
    "bg1": {"image": os.getenv("PAPER_BG1", "images/test1.jpeg")},
    "bg2": {"image": os.getenv("PAPER_BG2", "images/test2.jpeg")},
    "bg3": {"image": os.getenv("PAPER_BG3", "images/test3.jpeg")},
}

PROM_USERNAME = os.getenv("PROM_USERNAME", "prometheus")
PROM_PASSWORD = os.getenv("PROM_PASSWORD", "prometheus")
