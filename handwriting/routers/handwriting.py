import logging
from io import BytesIO
from typing import Optional
from urllib.parse import quote
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field
from ..config import DEFAULT_FONT
from ..dependencies import (
    get_background,
    get_exporter,
    get_font_registry,
    get_layout_engine,
    resolve_font,
)
from ..lib.errors import ExportTargetMissing, FontNotReady, FontUnavailable
from ..lib.layout import LayoutResult, StyleParameters
from ..lib.renderer import ExportResult

logger = logging.getLogger(__name__)

router = APIRouter()


class HandwritingRequest(BaseModel):
    text: str
    params: StyleParameters = Field(default_factory=StyleParameters)
    font_name: str = DEFAULT_FONT
    paper_style: str = "blank"
    filename: Optional[str] = None


class LayoutResponse(BaseModel):
    font_name: str
    layout: LayoutResult


def file_response(result: ExportResult) -> Response:
    return Response(
        content=result.data,
        media_type=result.media_type,
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(result.filename)}",
            "X-Page-Count": str(result.pages),
        },
    )


def handle_render_error(e: Exception):
    if isinstance(e, FontNotReady):
        raise HTTPException(status_code=503, detail="Font is still loading, try again shortly")
    if isinstance(e, FontUnavailable):
        raise HTTPException(status_code=400, detail="Font not found")
    if isinstance(e, ExportTargetMissing):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ValueError):
        raise HTTPException(status_code=400, detail=str(e))
    raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post("/preview", response_model=LayoutResponse)
def preview(
    request: HandwritingRequest,
    engine=Depends(get_layout_engine),
):
    return LayoutResponse(font_name=request.font_name, layout=engine.preview(request.text, request.params))


@router.post("/layout", response_model=LayoutResponse)
def layout(
    request: HandwritingRequest,
    engine=Depends(get_layout_engine),
    registry=Depends(get_font_registry),
):
    font_name = resolve_font(registry, request.font_name)
    try:
        result = engine.layout(request.text, request.params, font_name)
    except Exception as e:
        logger.error(f"Error computing layout: {str(e)}")
        handle_render_error(e)
    return LayoutResponse(font_name=font_name, layout=result)


@router.post("/export/image")
def export_image(
    request: HandwritingRequest,
    exporter=Depends(get_exporter),
    registry=Depends(get_font_registry),
):
    font_name = resolve_font(registry, request.font_name)
    background = get_background(request.paper_style)
    try:
        result = exporter.export_image(request.text, request.params, font_name, background, request.filename)
    except Exception as e:
        logger.error(f"Error generating handwriting image: {str(e)}")
        handle_render_error(e)
    return file_response(result)


@router.post("/export/pdf")
def export_pdf(
    request: HandwritingRequest,
    exporter=Depends(get_exporter),
    registry=Depends(get_font_registry),
):
    font_name = resolve_font(registry, request.font_name)
    background = get_background(request.paper_style)
    try:
        result = exporter.export_pdf(request.text, request.params, font_name, background, request.filename)
    except Exception as e:
        logger.error(f"Error generating handwriting PDF: {str(e)}")
        handle_render_error(e)
    return file_response(result)


@router.post("/export/page/{page_index}")
def export_page(
    page_index: int,
    request: HandwritingRequest,
    exporter=Depends(get_exporter),
    registry=Depends(get_font_registry),
):
    font_name = resolve_font(registry, request.font_name)
    background = get_background(request.paper_style)
    try:
        image = exporter.render_page(request.text, request.params, font_name, background, page_index)
    except Exception as e:
        logger.error(f"Error rendering page {page_index}: {str(e)}")
        handle_render_error(e)
    with BytesIO() as output:
        image.save(output, format="PNG")
        return Response(content=output.getvalue(), media_type="image/png")
