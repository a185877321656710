import logging

from fastapi import HTTPException
from typing import Optional
from .config import PAPER_STYLES
from .globals import (
    exporter,
    font_registry,
    layout_engine,
    params_store,
)
from .lib.errors import FontUnavailable
from .lib.fonts import FontRegistry
from .lib.renderer import Background


def get_layout_engine():
    return layout_engine


def get_exporter():
    return exporter


def get_font_registry():
    return font_registry


def get_params_store():
    return params_store


def resolve_font(registry: FontRegistry, font_name: str) -> str:
    try:
        return registry.resolve(font_name)
    except FontUnavailable as e:
        logging.warning(f"No usable font for request: {e}")
        raise HTTPException(status_code=400, detail="Font not found")


def get_background(paper_style: Optional[str]) -> Background:
    style = PAPER_STYLES.get(paper_style or "blank")
    if style is None:
        raise HTTPException(status_code=400, detail=f"Unknown paper style: {paper_style}")
    return Background(color=style.get("color", "#ffffff"), image_path=style.get("image"))
