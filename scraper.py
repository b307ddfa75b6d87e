# scraper.py
"""
Endpoint assemblers for the toonstream scraper API.

Each scrape_* coroutine resolves the site origin, fetches one or more pages
(proxy first, then direct), runs the extractors and returns the response
envelope:
    {"success": True, "data": {...}, "stats": {...}}

Invalid input raises HTTPException(400). An upstream 404 becomes
HTTPException(404); any other fetch failure becomes HTTPException(500) with
the upstream status in the message.
"""
from httpx import AsyncClient, AsyncHTTPTransport, RequestError, TimeoutException
from fastapi import HTTPException
from datetime import datetime, timezone
from enum import Enum
from urllib.parse import quote
import logging
import re
from typing import Dict, List, Optional

from config import BROWSER_HEADERS, IFRAME_TIMEOUT, REQUEST_TIMEOUT, USER_AGENT
from extractors import (
    ListingSection,
    extract_alphabet_nav,
    extract_all_iframes,
    extract_category_tabs,
    extract_comments,
    extract_content_list,
    extract_copyright,
    extract_episode_info,
    extract_episode_list,
    extract_episode_navigation,
    extract_footer,
    extract_home_article,
    extract_home_sections,
    extract_iframe_src,
    extract_logo,
    extract_meta_tags,
    extract_menu,
    extract_movie_details,
    extract_page_title,
    extract_pagination,
    extract_post_id,
    extract_related,
    extract_schedule,
    extract_season_episodes,
    extract_season_list,
    extract_section_title,
    extract_series_metadata,
    extract_suggestions,
    extract_video_options,
    extract_video_servers,
    make_soup,
)
from fetcher import FetchError, ProxyStyle, fetch_page
from models import CompactMovie, MediaItem, NamedLink, SeasonData
from normalizers import ContentType, extract_languages, parse_page_range_spec, resolve_season_numbers
from remote_config import RemoteConfigResolver

logger = logging.getLogger(__name__)

CATALOG_TYPES = ("series", "movies")
CATEGORY_TYPES = ("movies", "series", "post")
MIN_SEARCH_LENGTH = 2


class SiteSection(str, Enum):
    MENU = "menu"
    FOOTER = "footer"
    SCHEDULE = "schedule"
    RANDOM_SERIES = "randomSeries"
    RANDOM_MOVIES = "randomMovies"
    LOGO = "logo"
    COPYRIGHT = "copyright"
    METADATA = "metadata"


# Dependency to provide HTTP client
async def get_http_client():
    transport = AsyncHTTPTransport()
    client = AsyncClient(
        transport=transport,
        headers={"User-Agent": USER_AGENT},
        timeout=REQUEST_TIMEOUT,
        follow_redirects=True,
    )
    try:
        yield client
    finally:
        await client.aclose()


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_page_url(base_url: str, section: str, page: int = 1) -> str:
    """{base}/{section}/ for page 1, {base}/{section}/page/{n}/ otherwise."""
    section = section.strip("/")
    if page == 1:
        return f"{base_url}/{section}/"
    return f"{base_url}/{section}/page/{page}/"


def validate_page(page: int) -> int:
    if page is None or page < 1:
        raise HTTPException(status_code=400, detail="Invalid page number. Must be 1 or greater.")
    return page


def count_by_type(items: List[MediaItem]) -> Dict[str, int]:
    return {
        "seriesCount": sum(1 for item in items if item.content_type == ContentType.SERIES),
        "moviesCount": sum(1 for item in items if item.content_type == ContentType.MOVIE),
        "postsCount": sum(1 for item in items if item.content_type == ContentType.POST),
    }


async def fetch_or_raise(
    client: AsyncClient,
    resolver: RemoteConfigResolver,
    url: str,
    not_found: str,
    referer_url: Optional[str] = None,
    proxy_style: ProxyStyle = ProxyStyle.URL,
) -> str:
    logger.info(f"Scraping URL: {url}")
    try:
        return await fetch_page(client, resolver, url, referer_url=referer_url, proxy_style=proxy_style)
    except FetchError as e:
        if e.status_code == 404:
            raise HTTPException(status_code=404, detail=not_found)
        raise HTTPException(status_code=500, detail=e.message)


async def resolve_iframe_src(client: AsyncClient, resolver: RemoteConfigResolver, src: str, referer_url: Optional[str] = None) -> str:
    """
    Follow a player iframe to the iframe it embeds.
    Falls back to the original URL whenever the page can't be fetched or has
    no iframe.
    """
    if not src.startswith("http"):
        return src
    try:
        html = await fetch_page(client, resolver, src, referer_url=referer_url, timeout=IFRAME_TIMEOUT)
    except FetchError as e:
        logger.warning(f"Failed to resolve iframe {src}: {e.message}")
        return src
    nested = extract_iframe_src(html)
    if not nested:
        logger.debug(f"No nested iframe in {src}")
        return src
    if nested.startswith("//"):
        nested = "https:" + nested
    return nested


# Listings

async def scrape_home(client: AsyncClient, resolver: RemoteConfigResolver) -> dict:
    base_url = await resolver.get_base_url()
    home_url = f"{base_url}/home"
    html = await fetch_or_raise(client, resolver, home_url, "Home page not found")
    sections = extract_home_sections(html)
    return {
        "success": True,
        "data": {"baseUrl": base_url, "homeUrl": home_url, "sections": sections},
        "stats": {
            "totalSections": len(sections),
            "totalItems": sum(len(section.items) for section in sections),
        },
    }


async def scrape_catalog(client: AsyncClient, resolver: RemoteConfigResolver, catalog_type: str = "series", page: int = 1) -> dict:
    if catalog_type not in CATALOG_TYPES:
        raise HTTPException(status_code=400, detail='Invalid type parameter. Must be "series" or "movies".')
    validate_page(page)

    base_url = await resolver.get_base_url()
    catalog_url = build_page_url(base_url, catalog_type, page)
    html = await fetch_or_raise(client, resolver, catalog_url, f"Catalog page {page} not found")
    soup = make_soup(html)
    results = extract_content_list(soup)
    pagination = extract_pagination(soup, current_page=page)
    counts = count_by_type(results)

    return {
        "success": True,
        "data": {
            "baseUrl": base_url,
            "catalogUrl": catalog_url,
            "catalogType": catalog_type,
            "currentPage": pagination.current_page,
            "totalPages": pagination.total_pages,
            "results": results,
            "pagination": pagination,
        },
        "stats": {
            "resultsCount": len(results),
            "seriesCount": counts["seriesCount"],
            "moviesCount": counts["moviesCount"],
        },
    }


async def scrape_listing_page(client: AsyncClient, resolver: RemoteConfigResolver, kind: str, page: int = 1) -> dict:
    """The /series/ or /movies/ archive with its matching random sidebar."""
    if kind not in CATALOG_TYPES:
        raise ValueError(f"Unsupported listing kind: {kind}")
    validate_page(page)

    base_url = await resolver.get_base_url()
    page_url = build_page_url(base_url, kind, page)
    html = await fetch_or_raise(client, resolver, page_url, f"{kind.capitalize()} page {page} not found")
    soup = make_soup(html)
    items = extract_content_list(soup)
    pagination = extract_pagination(soup, current_page=page)
    sidebar_key, sidebar_section = (
        ("randomSeries", ListingSection.RANDOM_SERIES) if kind == "series" else ("randomMovies", ListingSection.RANDOM_MOVIES)
    )
    sidebar = extract_content_list(soup, sidebar_section)

    return {
        "success": True,
        "data": {
            "baseUrl": base_url,
            "pageUrl": page_url,
            "pageType": kind,
            "pageNumber": page,
            "pageTitle": extract_section_title(soup),
            "scrapedAt": now_iso(),
            kind: items,
            "pagination": pagination,
            sidebar_key: sidebar,
        },
        "stats": {
            f"{kind}Count": len(items),
            f"{sidebar_key}Count": len(sidebar),
            "currentPage": pagination.current_page,
            "totalPages": pagination.total_pages,
        },
    }


def slug_from_url(url: str) -> str:
    match = re.search(r"/([^/]+)/?$", url or "")
    return match.group(1) if match else ""


async def scrape_compact_movies(client: AsyncClient, resolver: RemoteConfigResolver, page: int = 1) -> dict:
    validate_page(page)
    base_url = await resolver.get_base_url()
    movies_url = build_page_url(base_url, "movies", page)
    html = await fetch_or_raise(client, resolver, movies_url, f"Movies page {page} not found")
    soup = make_soup(html)
    results = [
        CompactMovie(id=slug_from_url(item.url), title=item.title, url=item.url, poster=item.image)
        for item in extract_content_list(soup)
    ]
    pagination = extract_pagination(soup, current_page=page)
    return {
        "success": True,
        "data": {
            "category": "movies",
            "categoryName": extract_section_title(soup) or "Movies",
            "results": results,
            "pagination": {
                "currentPage": pagination.current_page,
                "totalPages": pagination.total_pages,
                "hasNextPage": pagination.has_next_page,
                "hasPrevPage": pagination.has_prev_page,
            },
        },
        "stats": {"resultsCount": len(results)},
    }


async def scrape_category(
    client: AsyncClient,
    resolver: RemoteConfigResolver,
    path: Optional[str],
    page: int = 1,
    content_type: Optional[str] = None,
) -> dict:
    if not path or not path.strip("/ "):
        raise HTTPException(
            status_code=400,
            detail="Category path is required. Use ?path=crunchyroll or ?path=language/hindi-language",
        )
    validate_page(page)
    if content_type and content_type not in CATEGORY_TYPES:
        raise HTTPException(status_code=400, detail="Invalid type parameter. Must be: movies, series, or post")

    category_path = path.strip().strip("/")
    base_url = await resolver.get_base_url()
    category_url = build_page_url(base_url, f"category/{category_path}", page)
    if content_type:
        category_url = f"{category_url}?type={content_type}"

    html = await fetch_or_raise(client, resolver, category_url, "Category page not found")
    soup = make_soup(html)
    content = extract_content_list(soup)
    pagination = extract_pagination(soup, current_page=page)
    random_series = extract_content_list(soup, ListingSection.RANDOM_SERIES)
    random_movies = extract_content_list(soup, ListingSection.RANDOM_MOVIES)
    counts = count_by_type(content)

    return {
        "success": True,
        "data": {
            "baseUrl": base_url,
            "pageUrl": category_url,
            "pageType": "category",
            "categoryPath": category_path,
            "categoryTitle": extract_section_title(soup),
            "pageNumber": page,
            "contentTypeFilter": content_type or "all",
            "scrapedAt": now_iso(),
            "categoryTabs": extract_category_tabs(soup),
            "content": content,
            "pagination": pagination,
            "randomSeries": random_series,
            "randomMovies": random_movies,
            "schedule": extract_schedule(soup),
        },
        "stats": {
            "contentCount": len(content),
            **counts,
            "randomSeriesCount": len(random_series),
            "randomMoviesCount": len(random_movies),
            "currentPage": pagination.current_page,
            "totalPages": pagination.total_pages,
        },
    }


async def scrape_letter(client: AsyncClient, resolver: RemoteConfigResolver, letter: Optional[str], page: int = 1) -> dict:
    if not letter or not letter.strip():
        raise HTTPException(
            status_code=400,
            detail='Letter parameter "letter" is required (e.g., ?letter=a or ?letter=0-9 for #).',
        )
    validate_page(page)

    letter = letter.strip()
    base_url = await resolver.get_base_url()
    letter_url = build_page_url(base_url, f"home/letter/{quote(letter, safe='')}", page)
    html = await fetch_or_raise(client, resolver, letter_url, f"Letter page '{letter}' not found")
    soup = make_soup(html)
    results = extract_content_list(soup)
    pagination = extract_pagination(soup, current_page=page)
    counts = count_by_type(results)

    return {
        "success": True,
        "data": {
            "baseUrl": base_url,
            "letterUrl": letter_url,
            "letter": letter.upper(),
            "currentPage": pagination.current_page,
            "totalPages": pagination.total_pages,
            "alphabetNav": extract_alphabet_nav(soup),
            "results": results,
            "pagination": pagination,
        },
        "stats": {
            "resultsCount": len(results),
            "seriesCount": counts["seriesCount"],
            "moviesCount": counts["moviesCount"],
        },
    }


async def scrape_search(client: AsyncClient, resolver: RemoteConfigResolver, query: Optional[str]) -> dict:
    query = (query or "").strip()
    if not query:
        raise HTTPException(status_code=400, detail="Search query is required. Use ?q=naruto or ?s=naruto")
    if len(query) < MIN_SEARCH_LENGTH:
        raise HTTPException(status_code=400, detail="Search query must be at least 2 characters long")

    base_url = await resolver.get_base_url()
    search_url = f"{base_url}/home/?s={quote(query, safe='')}"
    html = await fetch_or_raise(client, resolver, search_url, "Search page not found")
    soup = make_soup(html)
    results = extract_content_list(soup)
    random_series = extract_content_list(soup, ListingSection.RANDOM_SERIES)
    random_movies = extract_content_list(soup, ListingSection.RANDOM_MOVIES)

    return {
        "success": True,
        "data": {
            "baseUrl": base_url,
            "searchUrl": search_url,
            "pageType": "search",
            "searchQuery": query,
            "searchTitle": extract_section_title(soup) or query,
            "hasResults": len(results) > 0,
            "scrapedAt": now_iso(),
            "results": results,
            "randomSeries": random_series,
            "randomMovies": random_movies,
            "schedule": extract_schedule(soup),
        },
        "stats": {
            "resultsCount": len(results),
            **count_by_type(results),
            "randomSeriesCount": len(random_series),
            "randomMoviesCount": len(random_movies),
        },
    }


# Series, episodes and movies

async def scrape_season(client: AsyncClient, resolver: RemoteConfigResolver, base_url: str, series_slug: str, season_number: int) -> SeasonData:
    """One season, read from its first episode page. Failures stay inside the season record."""
    season_url = f"{base_url}/episode/{series_slug}-{season_number}x1/"
    logger.info(f"Fetching season {season_number}: {season_url}")
    try:
        html = await fetch_page(client, resolver, season_url)
    except FetchError as e:
        logger.error(f"Failed to fetch season {season_number} of {series_slug}: {e.message}")
        return SeasonData(season_number=season_number, error=e.message)
    return extract_season_episodes(html, season_number)


async def attach_episode_servers(client: AsyncClient, resolver: RemoteConfigResolver, season: SeasonData) -> int:
    """Fetch every episode page of a season one after another. Returns the number of servers found."""
    found = 0
    for episode in season.episodes:
        episode.servers = []
        if not episode.url:
            continue
        try:
            html = await fetch_page(client, resolver, episode.url)
        except FetchError as e:
            logger.warning(f"Failed to fetch servers for episode {episode.episode_number}: {e.message}")
            continue
        episode.servers = extract_video_servers(html)
        found += len(episode.servers)
    return found


def merge_by_name(groups: List[List[NamedLink]]) -> List[NamedLink]:
    merged: Dict[str, NamedLink] = {}
    for group in groups:
        for link in group:
            merged[link.name] = link
    return list(merged.values())


async def scrape_series(
    client: AsyncClient,
    resolver: RemoteConfigResolver,
    series_slug: Optional[str],
    seasons: Optional[str] = None,
    include_servers: bool = False,
) -> dict:
    if not series_slug or not series_slug.strip("/ "):
        raise HTTPException(
            status_code=400,
            detail="Series slug required. Use ?slug=attack-on-titan&seasons=1,2 or ?slug=attack-on-titan&seasons=all",
        )
    series_slug = series_slug.strip().strip("/")

    base_url = await resolver.get_base_url()
    series_url = f"{base_url}/series/{series_slug}/"
    html = await fetch_or_raise(client, resolver, series_url, "Series not found")
    metadata = extract_series_metadata(html)

    available = [season.season_number for season in metadata.available_seasons]
    # range ends are clamped to the highest available season
    spec = parse_page_range_spec(seasons, total=max(available, default=0))
    season_numbers = resolve_season_numbers(spec, available)
    if not season_numbers:
        requested = (seasons or "1").strip()
        raise HTTPException(
            status_code=404,
            detail=f"None of the requested seasons ({requested}) are available. "
                   f"Available seasons: {', '.join(str(n) for n in available) or 'none'}",
        )

    # Seasons and episodes are fetched sequentially
    season_data = []
    servers_found = 0
    for season_number in season_numbers:
        season = await scrape_season(client, resolver, base_url, series_slug, season_number)
        if include_servers:
            servers_found += await attach_episode_servers(client, resolver, season)
        season_data.append(season)

    categories = merge_by_name([season.categories for season in season_data])
    tags = merge_by_name([season.tags for season in season_data])
    cast = merge_by_name([season.cast for season in season_data])

    data = {
        "baseUrl": base_url,
        "seriesUrl": series_url,
        "seriesSlug": series_slug,
        "pageType": "series",
        "scrapedAt": now_iso(),
        "requestedSeasons": season_numbers,
        **metadata.model_dump(by_alias=True),
        "categories": categories,
        "tags": tags,
        "cast": cast,
        "seasons": season_data,
    }
    stats = {
        "totalSeasons": len(available),
        "requestedSeasons": len(season_numbers),
        "fetchedEpisodes": sum(len(season.episodes) for season in season_data),
        "castCount": len(cast),
        "categoriesCount": len(categories),
    }
    if include_servers:
        stats["serversFound"] = servers_found
    logger.info(f"Scraped {stats['fetchedEpisodes']} episodes across {len(season_data)} seasons of {series_slug}")
    return {"success": True, "data": data, "stats": stats}


async def scrape_episode(client: AsyncClient, resolver: RemoteConfigResolver, slug: Optional[str]) -> dict:
    if not slug or not slug.strip("/ "):
        raise HTTPException(status_code=400, detail='Episode slug parameter "slug" is required.')
    slug = slug.strip().strip("/")

    base_url = await resolver.get_base_url()
    episode_url = f"{base_url}/episode/{slug}/"
    html = await fetch_or_raise(client, resolver, episode_url, "Episode not found")
    soup = make_soup(html)
    info = extract_episode_info(soup)
    seasons = extract_season_list(soup)
    episodes = extract_episode_list(soup)
    servers = extract_video_servers(soup)
    languages = extract_languages([category.model_dump() for category in info.categories])

    return {
        "success": True,
        "data": {
            "baseUrl": base_url,
            "episodeUrl": episode_url,
            "episodeSlug": slug,
            "pageType": "episode",
            "scrapedAt": now_iso(),
            **info.model_dump(by_alias=True),
            "languages": languages,
            "navigation": extract_episode_navigation(soup),
            "seasons": seasons,
            "episodes": episodes,
            "servers": servers,
        },
        "stats": {
            "totalServersAvailable": len(servers),
            "castCount": len(info.cast),
            "categoriesCount": len(info.categories),
            "languagesCount": len(languages),
            "seasonsCount": len(seasons),
            "episodesCount": len(episodes),
        },
    }


async def scrape_movie(client: AsyncClient, resolver: RemoteConfigResolver, path: Optional[str]) -> dict:
    if not path or not path.strip("/ "):
        raise HTTPException(status_code=400, detail="Movie path is required. Use ?path=movie-name")
    movie_path = path.strip().strip("/")

    base_url = await resolver.get_base_url()
    movie_url = f"{base_url}/movies/{movie_path}/"
    html = await fetch_or_raise(client, resolver, movie_url, "Movie not found", referer_url=base_url)
    soup = make_soup(html)
    details = extract_movie_details(soup)
    video_options = extract_video_options(soup)

    logger.info(f"Processing {len(video_options.iframes)} video iframes")
    for iframe in video_options.iframes:
        if iframe.original_src:
            iframe.src = await resolve_iframe_src(client, resolver, iframe.original_src, referer_url=movie_url)

    comments = extract_comments(soup)
    related = extract_related(soup)
    return {
        "success": True,
        "data": {
            "baseUrl": base_url,
            "movieUrl": movie_url,
            "moviePath": movie_path,
            "postId": extract_post_id(soup),
            "scrapedAt": now_iso(),
            "movieDetails": details,
            "videoOptions": video_options,
            "comments": comments,
            "relatedMovies": related,
        },
        "stats": {
            "hasMovieDetails": bool(details.title),
            "hasBackdrop": bool(details.backdrop.header or details.backdrop.footer),
            "videoOptionsCount": len(video_options.iframes),
            "commentsCount": len(comments),
            "relatedMoviesCount": len(related),
        },
    }


# Embeds

def embed_failure(message: str) -> dict:
    return {"ok": False, "error": message, "url": None}


async def scrape_embed(client: AsyncClient, url: Optional[str], detailed: bool = False) -> dict:
    """
    Find the player iframe of an embed page. Returns {"ok": True, "url": ...}
    (plus "details" when detailed) or {"ok": False, "error": ..., "url": None}.
    """
    if not url:
        return embed_failure("URL parameter is required. Use ?url=https://example.com")
    if not url.startswith("http"):
        return embed_failure("Invalid URL provided")

    logger.info(f"Scraping embed URL: {url}")
    headers = dict(BROWSER_HEADERS)
    headers["Referer"] = url
    try:
        response = await client.get(url, headers=headers, timeout=IFRAME_TIMEOUT)
    except TimeoutException:
        logger.error(f"Timeout while fetching embed {url}")
        return embed_failure("Request timeout - server took too long to respond")
    except RequestError as e:
        logger.error(f"Network error while fetching embed {url}: {e!r}")
        return embed_failure(str(e) or "Unknown error occurred")

    if response.status_code != 200:
        return embed_failure(f"HTTP {response.status_code}: Page not accessible")

    iframe_url = extract_iframe_src(response.text)
    if not iframe_url:
        return embed_failure("No iframe found in the page")

    result = {"ok": True, "url": iframe_url}
    if detailed:
        iframes = extract_all_iframes(response.text)
        result["details"] = {
            "totalIframes": len(iframes),
            "allIframes": iframes,
            "scrapedAt": now_iso(),
            "sourceUrl": url,
            "statusCode": response.status_code,
        }
    return result


# Site chrome

async def scrape_site_sections(
    client: AsyncClient,
    resolver: RemoteConfigResolver,
    section: Optional[SiteSection] = None,
    query: str = "",
) -> dict:
    """Menu, footer, schedule, sidebars, logo and copyright of the search page."""
    base_url = await resolver.get_base_url()
    target_url = f"{base_url}/home/?s={quote(query or '', safe='')}"
    html = await fetch_or_raise(client, resolver, target_url, "Page not found", proxy_style=ProxyStyle.PATH)
    soup = make_soup(html)

    menu = extract_menu(soup)
    footer = extract_footer(soup)
    schedule = extract_schedule(soup)
    random_series = extract_content_list(soup, ListingSection.RANDOM_SERIES)
    random_movies = extract_content_list(soup, ListingSection.RANDOM_MOVIES)
    metadata = {
        "totalMenuItems": len(menu),
        "totalFooterItems": len(footer),
        "scheduleDays": sum(1 for entries in schedule.values() if entries),
        "randomSeriesCount": len(random_series),
        "randomMoviesCount": len(random_movies),
    }
    sections = {
        SiteSection.LOGO: extract_logo(soup),
        SiteSection.MENU: menu,
        SiteSection.FOOTER: footer,
        SiteSection.SCHEDULE: schedule,
        SiteSection.RANDOM_SERIES: random_series,
        SiteSection.RANDOM_MOVIES: random_movies,
        SiteSection.COPYRIGHT: extract_copyright(soup),
        SiteSection.METADATA: metadata,
    }

    result = {"success": True, "query": query or None, "timestamp": now_iso()}
    if section is not None:
        result["section"] = section.value
        result["data"] = sections[section]
    else:
        result["data"] = {key.value: value for key, value in sections.items()}
    result["stats"] = metadata
    return result


async def scrape_index(client: AsyncClient, resolver: RemoteConfigResolver, path: str = "/") -> dict:
    path = path or "/"
    if not path.startswith("/"):
        path = "/" + path
    base_url = await resolver.get_base_url()
    page_url = base_url + path
    html = await fetch_or_raise(client, resolver, page_url, "Page not found")
    soup = make_soup(html)
    suggestions = extract_suggestions(soup)
    meta = extract_meta_tags(soup)
    return {
        "success": True,
        "data": {
            "pageUrl": page_url,
            "site": {"title": extract_page_title(soup), "description": meta.get("description")},
            "homepage": extract_home_article(soup),
            "suggestions": suggestions,
            "meta": meta,
        },
        "stats": {"suggestionsCount": len(suggestions)},
    }
