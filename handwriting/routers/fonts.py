import logging
from fastapi import APIRouter, Depends, HTTPException
from ..dependencies import get_font_registry
from ..lib.errors import FontUnavailable

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
def get_available_fonts(registry=Depends(get_font_registry)):
    return {"available_fonts": [font.model_dump() for font in registry.fonts()]}


@router.post("/{font_id}/retry")
def retry_font(font_id: str, registry=Depends(get_font_registry)):
    try:
        status = registry.retry(font_id)
    except FontUnavailable as e:
        logger.error(f"Retry for unknown font: {str(e)}")
        raise HTTPException(status_code=404, detail="Font not found")
    return {"font_id": font_id, "status": status}
