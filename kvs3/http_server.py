"""
kvs3 HTTP server

FastAPI application exposing the per-tenant key-value API:

    GET    /        list keys (optionally with values)
    GET    /{id}    read one value
    POST   /{id}    write one value
    DELETE /{id}    delete one value

Start with `kvs3 serve`, or:
    uvicorn --factory kvs3.http_server:create_app --host 127.0.0.1 --port 5001
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from kvs3.config import Settings
from kvs3.exceptions import ValueDecodeError
from kvs3.namespace import object_key, tenant_root
from kvs3.services.listing import ListingService, ListQuery
from kvs3.services.projection import decode_value, encode_value, parse_mask, project
from kvs3.storage.base import ObjectStore

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> ObjectStore:
    return request.app.state.store


def get_listing(request: Request) -> ListingService:
    return request.app.state.listing


@router.get("/", summary="List keys")
async def list_values(
    prefix: str | None = None,
    limit: int | None = Query(None, ge=0),
    skip: int | None = Query(None, ge=0),
    reverse: bool = False,
    values: bool = False,
    mask: str | None = None,
    authorization: str = Header(""),
    listing: ListingService = Depends(get_listing),
) -> JSONResponse:
    """
    List the caller's keys, or `{key: value}` pairs with `values=true`.

    Always 200; a failed store listing reads as an empty array.
    """
    root = tenant_root(authorization)
    query = ListQuery(
        prefix=prefix,
        limit=limit,
        skip=skip,
        reverse=reverse,
        values=values,
        mask=mask,
    )
    logger.debug("list %s %s", root, query)
    result = await listing.list(root, query)
    return JSONResponse(content=result)


@router.get("/{oid}", summary="Read a value")
async def get_value(
    oid: str,
    mask: str | None = None,
    authorization: str = Header(""),
    store: ObjectStore = Depends(get_store),
) -> JSONResponse:
    key = object_key(authorization, oid)
    code, raw = await store.get(key)
    logger.debug("get %s %s", key, code)
    value = project(decode_value(raw, key), parse_mask(mask))
    return JSONResponse(content=value, status_code=code)


@router.post("/{oid}", summary="Write a value")
async def set_value(
    oid: str,
    request: Request,
    cache_max_age: int = Query(0, ge=0),
    authorization: str = Header(""),
    store: ObjectStore = Depends(get_store),
) -> Response:
    key = object_key(authorization, oid)
    # Any JSON document is a value, `null` included.
    try:
        value = decode_value(await request.body(), key)
    except ValueDecodeError as e:
        raise HTTPException(status_code=422, detail="request body must be JSON") from e
    code = await store.put(key, encode_value(value), cache_max_age)
    logger.debug("set %s %s cache_max_age=%s", key, code, cache_max_age)
    return Response(status_code=code)


@router.delete("/{oid}", summary="Delete a value")
async def delete_key(
    oid: str,
    authorization: str = Header(""),
    store: ObjectStore = Depends(get_store),
) -> Response:
    key = object_key(authorization, oid)
    code = await store.delete(key)
    logger.debug("delete %s %s", key, code)
    return Response(status_code=code)


async def value_decode_error_handler(request: Request, exc: ValueDecodeError) -> JSONResponse:
    logger.error("Stored value is not JSON: %s", exc, exc_info=exc)
    return JSONResponse(content={}, status_code=500)


def create_app(settings: Settings | None = None, store: ObjectStore | None = None) -> FastAPI:
    """Build the application; an S3Store is created from `settings` if no store is given."""
    settings = settings or Settings()
    if store is None:
        from kvs3.storage.s3 import S3Store

        store = S3Store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await app.state.store.init()
        yield

    # Every path segment is an object id, so the docs routes stay off.
    app = FastAPI(
        title="kvs3",
        description="Per-tenant key-value store on an object-storage bucket",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.listing = ListingService(store, settings.fetch_concurrency)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.origin],
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Accept", "Content-Type"],
    )
    app.add_exception_handler(ValueDecodeError, value_decode_error_handler)
    app.include_router(router)
    return app

