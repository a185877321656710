from prometheus_fastapi_instrumentator import Instrumentator
from .config import *
from .routers.handwriting import router as handwriting_router
from .routers.params import router as params_router
from .routers.fonts import router as fonts_router

from fastapi import FastAPI, HTTPException, status, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPBasicCredentials, HTTPBasic


import logging
import secrets

logging.basicConfig(level=logging.INFO)


app = FastAPI(title="Handwriting Simulator")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

security = HTTPBasic()


def verify_prometheus(credentials: HTTPBasicCredentials = Depends(security)):
    correct_username = secrets.compare_digest(credentials.username, PROM_USERNAME)
    correct_password = secrets.compare_digest(credentials.password, PROM_PASSWORD)
    if not (correct_username and correct_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username

try:
    Instrumentator().instrument(app).expose(app, include_in_schema=False, dependencies=[Depends(verify_prometheus)])
except Exception as e:
    logging.error(f"Error in instrumenting app {e}")


@app.get("/health")
async def health():
    return {"health": "ok"}


app.include_router(handwriting_router, prefix="/api/v1/handwriting", tags=["handwriting"])
app.include_router(params_router, prefix="/api/v1/handwriting/params", tags=["params"])
app.include_router(fonts_router, prefix="/api/v1/handwriting/fonts", tags=["fonts"])
