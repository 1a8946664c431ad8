import logging
import os
from contextlib import asynccontextmanager
from typing import Any, Optional

import httpx
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.oci_proxy_pipeline import build_pipeline
from ociproxy.errors import SigningError, ValidationError
from ociproxy.objects.proxy_result import OutboundCall
from ociproxy.processor.forwarder import RequestForwarder
from ociproxy.utils import resolve_host

logger = logging.getLogger(__name__)

DEFAULT_SERVICE = "objectstorage"
DEFAULT_DOMAIN = "oraclecloud.com"
DEFAULT_REGION = "ap-singapore-1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # args from env vars or fallback defaults
    timeout = float(os.getenv("OCI_PROXY_TIMEOUT", "30"))
    y_precision = int(os.getenv("OCI_OCR_Y_PRECISION", "2"))
    app.state.default_service = os.getenv("OCI_DEFAULT_SERVICE", DEFAULT_SERVICE)
    app.state.default_domain = os.getenv("OCI_DEFAULT_DOMAIN", DEFAULT_DOMAIN)
    app.state.default_region = os.getenv("OCI_DEFAULT_REGION", DEFAULT_REGION)

    app.state.forwarder = build_pipeline(timeout=timeout, y_precision=y_precision)

    yield  # allows app to run

    app.state.forwarder.client.close()


app = FastAPI(lifespan=lifespan)


class SignRequest(BaseModel):
    method: Optional[str] = None
    path: Optional[str] = None
    body: Any = None
    service: Optional[str] = None
    region: Optional[str] = None
    host: Optional[str] = None
    full_host: Optional[str] = None
    extract_text: bool = False


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/sign")
def sign(req: SignRequest, request: Request):
    state = request.app.state
    forwarder: RequestForwarder = getattr(state, "forwarder", None)
    if not forwarder:
        raise HTTPException(status_code=503, detail="Signer not ready")

    call = OutboundCall(
        method=req.method,
        path=req.path,
        host=resolve_host(
            req.service or getattr(state, "default_service", DEFAULT_SERVICE),
            req.region or getattr(state, "default_region", DEFAULT_REGION),
            req.host or getattr(state, "default_domain", DEFAULT_DOMAIN),
            req.full_host,
        ),
        body=req.body,
        extract_text=req.extract_text,
    )

    try:
        result = forwarder.forward(call)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail={"error": str(e)})
    except (SigningError, httpx.HTTPError, ValueError) as e:
        logger.error(f"[SIGN OCI ERROR] {type(e).__name__}: {e}")
        raise HTTPException(status_code=500, detail={"error": "Request failed", "message": str(e)})
    except Exception as e:
        logger.exception(f"[SIGN OCI ERROR] unexpected {type(e).__name__}: {e}")
        raise HTTPException(status_code=500, detail={"error": "Request failed", "message": str(e)})

    return JSONResponse(status_code=result.status, content={
        "status": result.status,
        "statusText": result.status_text,
        "data": result.data,
        "rawText": result.raw_text,
    })


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
