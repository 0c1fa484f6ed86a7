from __future__ import annotations

import logging
from typing import Any, Optional

import orjson
from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from . import config
from .auth import SignInRequest, credentials_from_request, dumps_credentials, loads_credentials, validate_credentials
from .details import get_details
from .errors import InvalidCredentials, ResourceNotFound, UnsupportedResourceKind, error_code
from .models import Credentials
from .search import search_report

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
log = logging.getLogger("awsdash")
if not log.handlers:
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def json_response(obj: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(orjson.loads(orjson.dumps(obj)), status_code=status_code)


def _error(msg: str, status_code: int) -> JSONResponse:
    return json_response({"error": msg}, status_code=status_code)


def _stored_credentials(req: Request) -> Optional[Credentials]:
    try:
        return loads_credentials(req.cookies.get(config.CREDENTIALS_COOKIE))
    except InvalidCredentials as e:
        log.info("no usable stored credentials: %s", e)
        return None


# -----------------------------------------------------------------------------
# App
# -----------------------------------------------------------------------------
app = FastAPI(title="awsdash")


@app.post('/api/auth/signin')
async def signin_api(body: SignInRequest):
    try:
        creds = credentials_from_request(body)
    except InvalidCredentials as e:
        return _error(str(e), 400)

    try:
        user = await validate_credentials(creds)
    except Exception as e:
        log.warning("credential validation failed: %s", error_code(e))
        return _error("Invalid AWS credentials or insufficient permissions", 401)

    resp = json_response({"success": True, "user": user})
    resp.set_cookie(
        config.CREDENTIALS_COOKIE,
        dumps_credentials(creds),
        httponly=True,
        samesite="strict",
        secure=config.COOKIE_SECURE,
    )
    return resp


@app.post('/api/auth/signout')
async def signout_api():
    resp = json_response({"success": True})
    resp.delete_cookie(config.CREDENTIALS_COOKIE)
    return resp


@app.get('/api/resources/search')
async def search_api(req: Request, q: Optional[str] = Query(None)):
    if not q or not q.strip():
        return _error("Search query is required", 400)
    creds = _stored_credentials(req)
    if creds is None:
        return _error("Not authenticated", 401)

    try:
        report = await search_report(creds, q)
    except Exception:
        log.exception("search failed for query %r", q)
        return _error("Failed to search AWS resources", 500)
    if report.failed:
        log.warning("search for %r is partial; failed kinds: %s", q, ", ".join(k.value for k in report.failed))
    return json_response([r.to_dict() for r in report.resources])


@app.get('/api/services/{kind}/{id_:path}')
async def service_details_api(req: Request, kind: str, id_: str):
    creds = _stored_credentials(req)
    if creds is None:
        return _error("Not authenticated", 401)

    try:
        res = await get_details(creds, kind, id_)
    except UnsupportedResourceKind:
        return _error("Unsupported service type", 400)
    except ResourceNotFound:
        return _error("Service not found", 404)
    except Exception:
        log.exception("detail fetch failed for %s %s", kind, id_)
        return _error("Failed to fetch service details", 500)
    return json_response(res.to_dict())
