import logging
from fastapi import APIRouter, Depends, HTTPException
from ..dependencies import get_params_store
from ..lib.errors import PersistenceCorrupt, PersistenceMiss
from ..lib.layout import StyleParameters

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/defaults")
def default_params():
    return StyleParameters().model_dump(by_alias=True)


@router.post("/save")
def save_params(
    params: StyleParameters,
    store=Depends(get_params_store),
):
    try:
        store.save(params)
    except PersistenceMiss as e:
        logger.error(f"Error saving parameters: {str(e)}")
        raise HTTPException(status_code=503, detail="Saving parameters failed, please retry")
    return {"message": "Parameters saved"}


@router.get("/load")
def load_params(store=Depends(get_params_store)):
    try:
        params = store.load()
    except PersistenceMiss as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceCorrupt as e:
        raise HTTPException(status_code=422, detail=str(e))
    return params.model_dump(by_alias=True)


@router.post("/reset")
def reset_params(store=Depends(get_params_store)):
    store.delete()
    return StyleParameters().model_dump(by_alias=True)
