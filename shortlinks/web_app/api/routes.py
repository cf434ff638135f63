"""API routes implementation."""

from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from ...common.url_builder import build_base_url, build_short_url
from ...database.models import Link
from ...errors import (
    ExhaustedError,
    InvalidLinkError,
    LinkNotFoundError,
    StoreUnavailable,
)
from .schemas import ErrorResponse, HealthResponse, LinkResponse, ShortenRequest

router = APIRouter()
redirect_router = APIRouter()

RETRY_LATER = "Could not create the short link right now, please try again"


def get_owner_id(request: Request) -> str:
    """Return the user id the auth proxy put in the owner header."""
    header = request.app.state.config.owner_header
    owner_id = request.headers.get(header)
    if not owner_id or not owner_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Missing {header} header",
        )
    return owner_id.strip()


def to_response(request: Request, link: Link) -> LinkResponse:
    config = request.app.state.config
    base_url = build_base_url(
        headers=request.headers,
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    return LinkResponse(
        short_code=link.short_code,
        short_url=build_short_url(link.short_code, base_url, config.path_prefix),
        original_url=link.original_url,
        click_count=link.click_count,
        created_at=link.created_at,
    )


@router.post(
    "/links",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid URL"},
        401: {"model": ErrorResponse, "description": "Missing owner"},
        503: {"model": ErrorResponse, "description": "Temporarily unable to create"},
    },
    summary="Create short link",
)
async def create_link(request: Request, body: ShortenRequest):
    """Create a short link owned by the calling user."""
    owner_id = get_owner_id(request)
    service = request.app.state.service

    try:
        link = await service.create_link(owner_id, body.url)
    except InvalidLinkError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except (ExhaustedError, StoreUnavailable):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=RETRY_LATER,
        )

    return to_response(request, link)


@router.get(
    "/links",
    response_model=List[LinkResponse],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid owner id"},
        401: {"model": ErrorResponse, "description": "Missing owner"},
    },
    summary="List own short links",
)
async def list_links(request: Request):
    """List the calling user's links, oldest first."""
    owner_id = get_owner_id(request)
    service = request.app.state.service

    try:
        links = await service.list_links(owner_id)
    except InvalidLinkError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except StoreUnavailable:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Links are temporarily unavailable, please try again",
        )

    return [to_response(request, link) for link in links]


@router.get(
    "/links/{short_code}",
    response_model=LinkResponse,
    responses={404: {"model": ErrorResponse, "description": "Short code not found"}},
    summary="Get link information",
)
async def get_link(request: Request, short_code: str):
    """Get a link and its click count without counting a visit."""
    service = request.app.state.service

    try:
        link = await service.get_link(short_code)
    except LinkNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Link not found")
    except StoreUnavailable:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Link store is temporarily unavailable",
        )

    return to_response(request, link)


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health_check(request: Request):
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        cache="healthy" if health["cache"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )


@redirect_router.get(
    "/{short_code}",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
    responses={404: {"model": ErrorResponse, "description": "Short code not found"}},
    summary="Follow short link",
)
async def visit(request: Request, short_code: str):
    """Redirect to the original URL and count the click."""
    resolver = request.app.state.resolver

    try:
        original_url = await resolver.resolve(short_code)
    except LinkNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Link not found")
    except StoreUnavailable:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Link store is temporarily unavailable",
        )

    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
