import logging
import os
from functools import lru_cache
from typing import Callable, Dict, List, Optional, Set
from PIL import ImageFont
from pydantic import BaseModel
from .errors import FontUnavailable
from .layout.models import FontStatus


logger = logging.getLogger(__name__)

BUILTIN_FONT = "default"
FONT_CACHE_SIZE = 64

FONT_DISPLAY_NAMES = {
    "aataotaowulongnailaosu": "阿淘淘五龙乃老苏",
    "aazhuniwomingmeixiangchuntian": "阿猪你我明没相春天",
    "anxiaxunhuanbofangjian": "安夏迅幻波芳简",
    "gongfanshouxiezhuanjiti": "工繁手写转机体",
    "gongfanyuexintixi": "工繁悦心体细",
    "menglixinghe": "萌礼行楷",
    "xiamorelianbingqilin": "下墨恋并琴琳",
    "xiangqiaoxiaoxingyunlingganti": "向桥小星云感体",
    "xingchenyudahai": "行辰雨大海",
    "zhongqingshanchengbangbangti": "中庆善成帮帮体",
    "zuorimeimengyanjiuyuan": "左右美眉妍娟圆",
    BUILTIN_FONT: "Default",
}


class FontCatalogEntry(BaseModel):
    display_name: str
    family_id: str
    path: Optional[str] = None


class FontInfo(BaseModel):
    display_name: str
    family_id: str
    status: FontStatus
    error: Optional[str] = None


def load_catalog(font_dir: str, include_builtin: bool = True) -> List[FontCatalogEntry]:
    entries = []
    if os.path.isdir(font_dir):
        for filename in sorted(os.listdir(font_dir)):
            if filename.endswith((".otf", ".ttf")):
                family_id = os.path.splitext(filename)[0]
                entries.append(
                    FontCatalogEntry(
                        display_name=FONT_DISPLAY_NAMES.get(family_id, family_id),
                        family_id=family_id,
                        path=os.path.abspath(os.path.join(font_dir, filename)),
                    )
                )
    else:
        logger.warning(f"Font directory {font_dir} does not exist")
    if include_builtin:
        entries.append(FontCatalogEntry(display_name=FONT_DISPLAY_NAMES[BUILTIN_FONT], family_id=BUILTIN_FONT))
    return entries


def open_font(path: Optional[str], size: float) -> ImageFont.FreeTypeFont:
    if path is None:
        return ImageFont.load_default(size)
    return ImageFont.truetype(path, size)


# Sizes are client supplied; at most FONT_CACHE_SIZE fonts stay open.
@lru_cache(maxsize=FONT_CACHE_SIZE)
def cached_font(path: Optional[str], size: float) -> ImageFont.FreeTypeFont:
    return open_font(path, size)


class FontRegistry:
    """Tracks the load state of every catalogued font.

    Each font is loaded on its own; a failure is recorded for that font and
    never stops the others.
    """

    def __init__(
        self,
        catalog: List[FontCatalogEntry],
        retries: int = 3,
        loader: Callable[[Optional[str], float], object] = open_font,
    ) -> None:
        self.catalog: Dict[str, FontCatalogEntry] = {entry.family_id: entry for entry in catalog}
        self.retries = max(1, retries)
        self.loader = loader
        self.loaded: Set[str] = set()
        self.failed: Dict[str, str] = {}

    def status(self, font_id: str) -> FontStatus:
        if font_id in self.failed or font_id not in self.catalog:
            return FontStatus.FAILED
        if font_id in self.loaded:
            return FontStatus.LOADED
        return FontStatus.PENDING

    def path(self, font_id: str) -> Optional[str]:
        entry = self.catalog.get(font_id)
        return entry.path if entry else None

    def load(self, font_id: str) -> FontStatus:
        entry = self.catalog.get(font_id)
        if entry is None:
            raise FontUnavailable(font_id, "unknown font")
        if font_id in self.loaded:
            return FontStatus.LOADED

        last_error = None
        for attempt in range(1, self.retries + 1):
            try:
                self.loader(entry.path, 12)
            except (OSError, ValueError) as e:
                last_error = e
                logger.warning(f"Loading font {font_id} failed (attempt {attempt}/{self.retries}): {e}")
                continue
            self.loaded.add(font_id)
            self.failed.pop(font_id, None)
            logger.info(f"Font {font_id} loaded")
            return FontStatus.LOADED

        self.failed[font_id] = str(last_error)
        logger.error(f"Font {font_id} is unavailable: {last_error}")
        return FontStatus.FAILED

    def load_all(self) -> Dict[str, FontStatus]:
        return {font_id: self.load(font_id) for font_id in self.catalog}

    def retry(self, font_id: str) -> FontStatus:
        if font_id not in self.catalog:
            raise FontUnavailable(font_id, "unknown font")
        self.failed.pop(font_id, None)
        self.loaded.discard(font_id)
        return self.load(font_id)

    def resolve(self, selected: str) -> str:
        """Return ``selected`` unless it failed, else the first loaded font in catalog order."""
        if self.status(selected) != FontStatus.FAILED:
            return selected
        for font_id in self.catalog:
            if self.status(font_id) == FontStatus.LOADED:
                logger.info(f"Font {selected} unavailable, falling back to {font_id}")
                return font_id
        raise FontUnavailable(selected, "no loaded font to fall back to")

    def fonts(self) -> List[FontInfo]:
        return [
            FontInfo(
                display_name=entry.display_name,
                family_id=entry.family_id,
                status=self.status(entry.family_id),
                error=self.failed.get(entry.family_id),
            )
            for entry in self.catalog.values()
        ]


class PillowFontMetrics:
    """Measures advances with the font file the registry knows for a family."""

    def __init__(self, registry: FontRegistry) -> None:
        self.registry = registry

    def font(self, font_family: str, font_size: float) -> ImageFont.FreeTypeFont:
        return cached_font(self.registry.path(font_family), font_size)

    def measure_advance(self, text: str, font_family: str, font_size: float) -> float:
        return self.font(font_family, font_size).getlength(text)
