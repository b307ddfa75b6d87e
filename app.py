#  app.py
import logging
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Optional
from httpx import AsyncClient

from config import CACHE_CONTROL
from models import ErrorResponse
from remote_config import RemoteConfigResolver, default_config_cache
from scraper import (
    SiteSection,
    get_http_client,
    scrape_catalog,
    scrape_category,
    scrape_compact_movies,
    scrape_embed,
    scrape_episode,
    scrape_home,
    scrape_index,
    scrape_letter,
    scrape_listing_page,
    scrape_movie,
    scrape_search,
    scrape_series,
    scrape_site_sections,
)

# Configure logging
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Toonstream Scraper API",
    description="Read-only JSON API over toonstream: listings, search, series, episodes, movies and embeds.",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

# Accepted spellings of ?section= for /extra and /scrape
SECTION_ALIASES = {
    "1": SiteSection.MENU,
    "menu": SiteSection.MENU,
    "2": SiteSection.FOOTER,
    "footer": SiteSection.FOOTER,
    "3": SiteSection.SCHEDULE,
    "schedule": SiteSection.SCHEDULE,
    "4": SiteSection.RANDOM_SERIES,
    "randomseries": SiteSection.RANDOM_SERIES,
    "random-series": SiteSection.RANDOM_SERIES,
    "5": SiteSection.RANDOM_MOVIES,
    "randommovies": SiteSection.RANDOM_MOVIES,
    "random-movies": SiteSection.RANDOM_MOVIES,
    "logo": SiteSection.LOGO,
    "copyright": SiteSection.COPYRIGHT,
    "metadata": SiteSection.METADATA,
}

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid or missing parameter"},
    404: {"model": ErrorResponse, "description": "Page not found upstream"},
    500: {"model": ErrorResponse, "description": "Upstream fetch failed or internal error"},
}


def get_config_resolver(client: AsyncClient = Depends(get_http_client)) -> RemoteConfigResolver:
    return RemoteConfigResolver(client, default_config_cache)


def json_response(content, status_code: int = 200) -> JSONResponse:
    headers = dict(CORS_HEADERS)
    headers["Cache-Control"] = CACHE_CONTROL
    return JSONResponse(content=jsonable_encoder(content), status_code=status_code, headers=headers)


def error_response(status_code: int, detail) -> JSONResponse:
    content = {"success": False}
    if isinstance(detail, dict):
        content.update(detail)
    else:
        content["error"] = str(detail)
    return JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)


def is_truthy(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in ("true", "1")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return error_response(405, "Method not allowed. Use GET request.")
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return error_response(exc.status_code, exc.detail)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        field = errors[0].get("loc", ["", "parameter"])[-1]
        message = f"Invalid value for parameter '{field}': {errors[0].get('msg', 'invalid value')}"
    else:
        message = "Invalid request parameters"
    return error_response(400, message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return error_response(500, "Internal server error")


# Preflight for every path
@app.options("/{rest_of_path:path}", include_in_schema=False)
async def preflight(rest_of_path: str):
    return JSONResponse(content=None, status_code=200, headers=CORS_HEADERS)


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Toonstream Scraper API",
        "version": "1.0.0",
        "endpoints": {
            "listings": {
                "home": "/home",
                "catalog": "/catalog?type={series|movies}&page={page}",
                "series_page": "/series_page?page={page}",
                "movies_page": "/movies_page?page={page}",
                "movies_compact": "/s_movies?page={page}",
                "category": "/category?path={path}&page={page}&type={movies|series|post}",
                "letter": "/letter?letter={letter}&page={page}",
                "search": "/search?q={query}",
            },
            "details": {
                "series": "/series?slug={slug}&seasons={1,2|1-3|all|latest}&servers={true|false}",
                "episode": "/episode?slug={slug}",
                "movie": "/movies?path={path}",
            },
            "embeds": {
                "embed": "/embed?url={url}&detailed={true|false}",
                "src": "/src?url={url}",
            },
            "site": {
                "extra": "/extra?section={menu|footer|schedule|randomSeries|randomMovies|logo|copyright|metadata}&s={query}",
                "index": "/index?path={path}",
            },
        },
        "documentation": "/docs"
    }


@router.get(
    "/home",
    responses=ERROR_RESPONSES,
    summary="Home page sections",
    description="Sliders and grids of the home page."
)
async def get_home(resolver: RemoteConfigResolver = Depends(get_config_resolver)):
    return json_response(await scrape_home(resolver.client, resolver))


@router.get(
    "/catalog",
    responses=ERROR_RESPONSES,
    summary="Series or movies catalog",
    description="One page of the series or movies archive. Example: `?type=movies&page=2`"
)
async def get_catalog(
    type: str = Query("series", description="series or movies"),
    page: int = Query(1, description="Page number, 1 or greater"),
    resolver: RemoteConfigResolver = Depends(get_config_resolver)
):
    return json_response(await scrape_catalog(resolver.client, resolver, type, page))


@router.get(
    "/series_page",
    responses=ERROR_RESPONSES,
    summary="Series archive page",
    description="Series archive with the random series sidebar."
)
async def get_series_page(
    page: int = Query(1, description="Page number, 1 or greater"),
    resolver: RemoteConfigResolver = Depends(get_config_resolver)
):
    return json_response(await scrape_listing_page(resolver.client, resolver, "series", page))


@router.get(
    "/movies_page",
    responses=ERROR_RESPONSES,
    summary="Movies archive page",
    description="Movies archive with the random movies sidebar."
)
async def get_movies_page(
    page: int = Query(1, description="Page number, 1 or greater"),
    resolver: RemoteConfigResolver = Depends(get_config_resolver)
):
    return json_response(await scrape_listing_page(resolver.client, resolver, "movies", page))


@router.get(
    "/s_movies",
    responses=ERROR_RESPONSES,
    summary="Compact movies list",
    description="Movies archive reduced to id, title, url and poster."
)
async def get_compact_movies(
    page: int = Query(1, description="Page number, 1 or greater"),
    resolver: RemoteConfigResolver = Depends(get_config_resolver)
):
    return json_response(await scrape_compact_movies(resolver.client, resolver, page))


@router.get(
    "/category",
    responses=ERROR_RESPONSES,
    summary="Category listing",
    description="Listing of a category path. Example: `?path=language/hindi-language&type=series`"
)
async def get_category(
    path: Optional[str] = Query(None, description="Category path, e.g. crunchyroll or language/hindi-language"),
    page: int = Query(1, description="Page number, 1 or greater"),
    type: Optional[str] = Query(None, description="movies, series or post"),
    resolver: RemoteConfigResolver = Depends(get_config_resolver)
):
    return json_response(await scrape_category(resolver.client, resolver, path, page, type))


@router.get(
    "/letter",
    responses=ERROR_RESPONSES,
    summary="Alphabetical index",
    description="Titles starting with a letter. Use `0-9` for titles starting with a digit."
)
async def get_letter(
    letter: Optional[str] = Query(None, description="Letter, or 0-9"),
    page: int = Query(1, description="Page number, 1 or greater"),
    resolver: RemoteConfigResolver = Depends(get_config_resolver)
):
    return json_response(await scrape_letter(resolver.client, resolver, letter, page))


@router.get(
    "/search",
    responses=ERROR_RESPONSES,
    summary="Search",
    description="Site search. The query may be passed as `q`, `s` or `query`."
)
async def search(
    q: Optional[str] = Query(None, description="Search query, at least 2 characters"),
    s: Optional[str] = Query(None, description="Alias of q"),
    query: Optional[str] = Query(None, description="Alias of q"),
    resolver: RemoteConfigResolver = Depends(get_config_resolver)
):
    return json_response(await scrape_search(resolver.client, resolver, q or s or query))


@router.get(
    "/series",
    responses=ERROR_RESPONSES,
    summary="Series details",
    description="Series metadata and the episodes of the requested seasons. Example: `?slug=attack-on-titan&seasons=1-3`"
)
async def get_series(
    slug: Optional[str] = Query(None, description="Series slug"),
    series: Optional[str] = Query(None, description="Alias of slug"),
    seasons: Optional[str] = Query(None, description="1, 1,3, 2-4, all or latest"),
    season: Optional[str] = Query(None, description="Alias of seasons"),
    servers: Optional[str] = Query(None, description="true or 1 to fetch video servers of every episode"),
    server: Optional[str] = Query(None, description="Alias of servers"),
    resolver: RemoteConfigResolver = Depends(get_config_resolver)
):
    include_servers = is_truthy(servers if servers is not None else server)
    return json_response(await scrape_series(resolver.client, resolver, slug or series, seasons or season, include_servers))


@router.get(
    "/movies",
    responses=ERROR_RESPONSES,
    summary="Movie details",
    description="Movie details, player options with resolved iframes, comments and related movies."
)
async def get_movie(
    path: Optional[str] = Query(None, description="Movie path, e.g. movie-name"),
    resolver: RemoteConfigResolver = Depends(get_config_resolver)
):
    return json_response(await scrape_movie(resolver.client, resolver, path))


@router.get(
    "/episode",
    responses=ERROR_RESPONSES,
    summary="Episode details",
    description="Episode info, navigation, season list and video servers. Example: `?slug=naruto-1x1`"
)
async def get_episode(
    slug: Optional[str] = Query(None, description="Episode slug, e.g. naruto-1x1"),
    resolver: RemoteConfigResolver = Depends(get_config_resolver)
):
    return json_response(await scrape_episode(resolver.client, resolver, slug))


async def embed_endpoint(client: AsyncClient, url: Optional[str], detailed: bool) -> JSONResponse:
    result = await scrape_embed(client, url, detailed=detailed)
    return json_response(result, status_code=200 if result["ok"] else 400)


@router.get(
    "/embed",
    summary="Resolve embed iframe",
    description="First player iframe of an embed page. `detailed=true` adds every iframe found."
)
async def get_embed(
    url: Optional[str] = Query(None, description="Embed page URL"),
    src: Optional[str] = Query(None, description="Alias of url"),
    detailed: Optional[str] = Query(None, description="true or 1 for iframe details"),
    client: AsyncClient = Depends(get_http_client)
):
    return await embed_endpoint(client, url or src, is_truthy(detailed))


@router.get(
    "/src",
    summary="Resolve embed iframe source",
    description="First player iframe of an embed page."
)
async def get_src(
    url: Optional[str] = Query(None, description="Embed page URL"),
    src: Optional[str] = Query(None, description="Alias of url"),
    client: AsyncClient = Depends(get_http_client)
):
    return await embed_endpoint(client, url or src, False)


async def site_sections_endpoint(resolver: RemoteConfigResolver, section: Optional[str], s: Optional[str]) -> JSONResponse:
    selected = None
    if section:
        selected = SECTION_ALIASES.get(section.strip().lower())
        if selected is None:
            raise HTTPException(status_code=400, detail={
                "error": "Invalid section",
                "availableSections": [value.value for value in SiteSection],
            })
    return json_response(await scrape_site_sections(resolver.client, resolver, selected, s or ""))


@router.get(
    "/extra",
    responses=ERROR_RESPONSES,
    summary="Site chrome",
    description="Menu, footer, schedule, random sidebars, logo and copyright. `section` selects one of them."
)
async def get_extra(
    section: Optional[str] = Query(None, description="1-5, menu, footer, schedule, randomSeries, randomMovies, logo, copyright or metadata"),
    s: Optional[str] = Query(None, description="Search query used for the page"),
    resolver: RemoteConfigResolver = Depends(get_config_resolver)
):
    return await site_sections_endpoint(resolver, section, s)


@router.get(
    "/scrape",
    responses=ERROR_RESPONSES,
    summary="Site chrome",
    description="Same as /extra."
)
async def get_scrape(
    section: Optional[str] = Query(None, description="Section name or number"),
    s: Optional[str] = Query(None, description="Search query used for the page"),
    resolver: RemoteConfigResolver = Depends(get_config_resolver)
):
    return await site_sections_endpoint(resolver, section, s)


@router.get(
    "/index",
    responses=ERROR_RESPONSES,
    summary="Site index",
    description="Site title, description, homepage article and search suggestions."
)
async def get_index(
    path: str = Query("/", description="Page path"),
    resolver: RemoteConfigResolver = Depends(get_config_resolver)
):
    return json_response(await scrape_index(resolver.client, resolver, path))


app.include_router(router)
app.include_router(router, prefix="/api", include_in_schema=False)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
