# extractors.py
"""
HTML extraction for toonstream pages.

Every extract_* function accepts raw HTML (or an already parsed
BeautifulSoup tree) and returns typed records from models.py. Missing markup
never raises: the result degrades to empty lists, empty strings or None.
The only error raised here is ValueError from extract_view for an unknown
view name.
"""
import logging
import re
from enum import Enum
from typing import Dict, List, Optional, Union

from bs4 import BeautifulSoup, Tag

from config import WEEKDAYS
from models import (
    AlphabetLink,
    ArticleSection,
    Backdrop,
    CategoryTab,
    Comment,
    Copyright,
    Episode,
    EpisodeInfo,
    EpisodeNavigation,
    FooterItem,
    HomeArticle,
    HomeItem,
    HomeSection,
    IframeInfo,
    LanguageServers,
    LanguageTab,
    Logo,
    MediaItem,
    MenuItem,
    MenuLink,
    MovieDetails,
    NamedLink,
    PageLink,
    PaginationInfo,
    PlayerIframe,
    RelatedItem,
    Schedule,
    ScheduleEntry,
    SeasonData,
    SeasonInfo,
    SeasonOption,
    SeriesMetadata,
    ServerTab,
    Suggestion,
    VideoOptions,
    VideoServer,
)
from normalizers import (
    CATEGORY_PREFIX,
    COUNTRY_PREFIX,
    LETTERS_PREFIX,
    TAG_PREFIX,
    clean_text,
    content_type_from_tokens,
    decode_cast,
    decode_class_tokens,
    decode_directors,
    decode_year,
    normalize_image_url,
    parse_int,
)

logger = logging.getLogger(__name__)

Markup = Union[str, bytes, BeautifulSoup, Tag, None]

RATING_RE = re.compile(r"\d+(?:\.\d+)?")
OPTION_ID_RE = re.compile(r"^options-(\d+)$")
MENU_ITEM_ID_RE = re.compile(r"menu-item-(\d+)")
POST_ID_RE = re.compile(r"postid-(\d+)")
POST_ENTRY_ID_RE = re.compile(r"^post-\d+$")
CSS_URL_RE = re.compile(r"url\(\s*['\"]?([^'\")]+)['\"]?\s*\)")
SERIES_SLUG_RE = re.compile(r"/series/([^/?#]+)")
SERVER_NAME_SUFFIXES = ("-Multi Audio", "-Hindi-Eng-Jap", "-Hindi-Eng")


class ListingSection(str, Enum):
    MAIN = "main"
    RANDOM_SERIES = "random_series"
    RANDOM_MOVIES = "random_movies"
    SIDEBAR = "sidebar"


# Region selectors tried in order; the first region found wins
LISTING_SELECTORS = {
    ListingSection.MAIN: ["#movies-a ul.post-lst", ".section.movies ul.post-lst"],
    ListingSection.RANDOM_SERIES: ["#widget_list_movies_series-4 ul.post-lst"],
    ListingSection.RANDOM_MOVIES: ["#widget_list_movies_series-5 ul.post-lst"],
    ListingSection.SIDEBAR: [".wdgt-sidebar ul.post-lst"],
}


class View(str, Enum):
    CONTENT_LIST = "content_list"
    PAGINATION = "pagination"
    SCHEDULE = "schedule"
    MENU = "menu"
    FOOTER = "footer"
    SERIES_METADATA = "series_metadata"
    SEASON_EPISODES = "season_episodes"
    VIDEO_SERVERS = "video_servers"
    META_TAGS = "meta_tags"
    IFRAME_SRC = "iframe_src"
    CATEGORY_TABS = "category_tabs"
    ALPHABET_NAV = "alphabet_nav"
    HOME_SECTIONS = "home_sections"
    LOGO = "logo"
    COPYRIGHT = "copyright"


def make_soup(html: Markup) -> Union[BeautifulSoup, Tag]:
    if isinstance(html, (BeautifulSoup, Tag)):
        return html
    if isinstance(html, bytes):
        html = html.decode("utf-8", errors="replace")
    return BeautifulSoup(html or "", "html.parser")


def _text(element: Optional[Tag]) -> str:
    if element is None:
        return ""
    return clean_text(element.get_text(" "))


def _attr(element: Optional[Tag], name: str) -> str:
    if element is None:
        return ""
    value = element.get(name)
    if value is None:
        return ""
    if isinstance(value, list):
        return " ".join(value)
    return value.strip()


def _classes(element: Optional[Tag]) -> List[str]:
    if element is None:
        return []
    return element.get("class") or []


def _image_src(img: Optional[Tag]) -> str:
    return _attr(img, "src") or _attr(img, "data-src")


def _select_region(soup, selectors: List[str]) -> Optional[Tag]:
    for selector in selectors:
        region = soup.select_one(selector)
        if region is not None:
            return region
    return None


def _named_links(scope, selector: str) -> List[NamedLink]:
    if scope is None:
        return []
    return [NamedLink(name=_text(a), url=_attr(a, "href")) for a in scope.select(selector)]


def _rating(text: str) -> Optional[str]:
    match = RATING_RE.search(text.replace("TMDB", ""))
    return match.group(0) if match else None


# Listings

def parse_media_item(li: Tag) -> MediaItem:
    classes = _classes(li)
    content_type = content_type_from_tokens(classes)
    img = li.find("img")
    link = li.select_one("a.lnk-blk") or li.find("a", href=True)
    return MediaItem(
        id=_attr(li, "id"),
        title=_text(li.select_one(".entry-title")),
        image=normalize_image_url(_image_src(img)),
        image_alt=_attr(img, "alt"),
        url=_attr(link, "href"),
        rating=_rating(_text(li.select_one(".vote"))),
        content_type=content_type,
        categories=decode_class_tokens(classes, CATEGORY_PREFIX),
        tags=decode_class_tokens(classes, TAG_PREFIX),
        cast=decode_cast(classes, content_type),
        directors=decode_directors(classes, content_type),
        countries=decode_class_tokens(classes, COUNTRY_PREFIX),
        letters=decode_class_tokens(classes, LETTERS_PREFIX, humanize=False),
        year=decode_year(classes),
    )


def extract_content_list(html: Markup, section: ListingSection = ListingSection.MAIN) -> List[MediaItem]:
    """Listing entries (li#post-N) of one page region."""
    soup = make_soup(html)
    region = _select_region(soup, LISTING_SELECTORS[ListingSection(section)])
    if region is None:
        return []
    items = []
    for li in region.find_all("li", id=POST_ENTRY_ID_RE, recursive=False):
        items.append(parse_media_item(li))
    return items


def extract_pagination(html: Markup, current_page: int = 1) -> PaginationInfo:
    """
    Page links of the `.navigation.pagination` block. current_page is used
    when the markup does not mark a current link.
    """
    soup = make_soup(html)
    current = max(int(current_page or 1), 1)
    nav = soup.select_one(".navigation.pagination .nav-links") or soup.select_one(".navigation.pagination")
    if nav is None:
        return PaginationInfo(current_page=current, total_pages=current)

    next_url = None
    prev_url = None
    pages: List[PageLink] = []
    seen = set()
    for element in nav.find_all(["a", "span"]):
        if element.parent is not nav and element.parent.name in ("a", "span"):
            continue
        text = _text(element)
        href = _attr(element, "href") or None
        is_current = "current" in _classes(element)
        if text == "NEXT":
            next_url = href or next_url
        elif text in ("PREV", "PREVIOUS"):
            prev_url = href or prev_url
        elif text.isdigit():
            page = int(text)
            if page < 1:
                continue
            if is_current:
                current = page
            if page not in seen:
                seen.add(page)
                pages.append(PageLink(page=page, url=href, current=is_current))

    total = max([page.page for page in pages] + [current])
    return PaginationInfo(
        current_page=current,
        total_pages=total,
        has_next_page=next_url is not None,
        has_prev_page=prev_url is not None,
        next_page_url=next_url,
        prev_page_url=prev_url,
        pages=pages,
    )


# Site chrome

def extract_schedule(html: Markup) -> Schedule:
    """Weekly schedule; every weekday key is present, possibly empty."""
    soup = make_soup(html)
    schedule: Schedule = {}
    for day in WEEKDAYS:
        container = soup.find(id=day)
        entries = []
        if container is not None:
            for item in container.select(".custom-schedule-item"):
                entries.append(ScheduleEntry(
                    time=_text(item.select_one(".schedule-time")),
                    show=_text(item.select_one(".schedule-description")),
                ))
        schedule[day] = entries
    return schedule


def _menu_item_id(li: Tag) -> Optional[int]:
    match = MENU_ITEM_ID_RE.search(_attr(li, "id"))
    return int(match.group(1)) if match else None


def extract_menu(html: Markup) -> List[MenuItem]:
    soup = make_soup(html)
    menu = soup.select_one("ul.menu.dfxc.dv.or-1")
    if menu is None:
        return []
    items = []
    for li in menu.find_all("li", recursive=False):
        link = li.find("a", recursive=False) or li.find("a")
        if link is None:
            continue
        has_children = "menu-item-has-children" in _classes(li)
        children = []
        submenu = li.select_one("ul.sub-menu") if has_children else None
        if submenu is not None:
            for child in submenu.find_all("li", recursive=False):
                child_link = child.find("a")
                if child_link is None:
                    continue
                children.append(MenuLink(id=_menu_item_id(child), title=_text(child_link), url=_attr(child_link, "href")))
        items.append(MenuItem(
            id=_menu_item_id(li),
            title=_text(link),
            url=_attr(link, "href"),
            has_children=has_children,
            children=children,
        ))
    return items


def extract_footer(html: Markup) -> List[FooterItem]:
    soup = make_soup(html)
    menu = soup.select_one("nav.top.dfxc.alg-cr ul.menu")
    if menu is None:
        return []
    items = []
    for li in menu.find_all("li", recursive=False):
        link = li.find("a")
        if link is None:
            continue
        items.append(FooterItem(
            id=_menu_item_id(li),
            title=_text(link),
            url=_attr(link, "href"),
            rel=_attr(link, "rel") or None,
        ))
    return items


def extract_logo(html: Markup) -> Optional[Logo]:
    soup = make_soup(html)
    figure = soup.select_one("figure.logo")
    if figure is None:
        return None
    img = figure.find("img")
    return Logo(url=_attr(figure.find("a"), "href"), image=normalize_image_url(_image_src(img)), alt=_attr(img, "alt"))


def extract_copyright(html: Markup) -> Optional[Copyright]:
    soup = make_soup(html)
    for center in soup.find_all("center"):
        paragraphs = [_text(p) for p in center.find_all("p")]
        paragraphs = [p for p in paragraphs if p]
        notice = next((p for p in paragraphs if p.startswith("Copyright")), None)
        if notice is None:
            continue
        disclaimer = next((p for p in paragraphs if p != notice), "")
        return Copyright(disclaimer=disclaimer, copyright=notice)
    return None


def extract_section_title(html: Markup) -> str:
    return _text(make_soup(html).select_one(".section-title"))


def extract_category_tabs(html: Markup) -> List[CategoryTab]:
    soup = make_soup(html)
    return [
        CategoryTab(
            label=_text(a),
            url=_attr(a, "href"),
            active="on" in _classes(a),
            type=_attr(a, "data-post") or "movies-series",
        )
        for a in soup.select(".aa-tbs.cat-t a")
    ]


def extract_alphabet_nav(html: Markup) -> List[AlphabetLink]:
    soup = make_soup(html)
    return [
        AlphabetLink(letter=_text(a), url=_attr(a, "href"), active="on" in _classes(a))
        for a in soup.select("ul.az-lst a")
        if _attr(a, "href")
    ]


def extract_meta_tags(html: Markup) -> Dict[str, str]:
    """Flattened <meta> map keyed by name, property, http-equiv or itemprop."""
    soup = make_soup(html)
    tags = {}
    for meta in soup.find_all("meta"):
        key = _attr(meta, "name") or _attr(meta, "property") or _attr(meta, "http-equiv") or _attr(meta, "itemprop")
        if key and meta.has_attr("content") and key not in tags:
            tags[key] = _attr(meta, "content")
    return tags


def extract_page_title(html: Markup) -> Optional[str]:
    return _text(make_soup(html).find("title")) or None


def extract_post_id(html: Markup) -> Optional[str]:
    soup = make_soup(html)
    body = soup.find("body")
    match = POST_ID_RE.search(" ".join(_classes(body)))
    return match.group(1) if match else None


# Home and index pages

def _series_slug(url: str) -> Optional[str]:
    match = SERIES_SLUG_RE.search(url or "")
    return match.group(1) if match else None


def _background_image(slide: Tag) -> Optional[str]:
    for element in [slide] + slide.find_all(style=True):
        match = CSS_URL_RE.search(_attr(element, "style"))
        if match:
            return match.group(1)
    return _image_src(slide.find("img")) or None


def extract_home_sections(html: Markup) -> List[HomeSection]:
    """`section[id]` blocks of /home: the `featured` slider and the card grids."""
    soup = make_soup(html)
    sections = []
    for section in soup.select("section[id]"):
        section_id = _attr(section, "id")
        title = _text(section.find("h2")) or None
        items = []
        if section_id == "featured":
            for slide in section.select(".swiper-slide"):
                link = slide.find("a", href=True)
                heading = slide.find("h2")
                if link is None or heading is None:
                    continue
                desc = slide.select_one("p.desc")
                items.append(HomeItem(
                    title=_text(heading),
                    slug=_series_slug(_attr(link, "href")),
                    url=_attr(link, "href"),
                    image=normalize_image_url(_background_image(slide)),
                    description=_text(desc) if desc else None,
                ))
            sections.append(HomeSection(id=section_id, title=title, type="slider", items=items))
            continue
        for card in section.select("article.item.movies"):
            link = card.find("a", href=True)
            heading = card.find("h3")
            if link is None or heading is None:
                continue
            year = card.select_one("span.year")
            quality = card.select_one("span.quality")
            items.append(HomeItem(
                title=_text(heading),
                slug=_series_slug(_attr(link, "href")),
                url=_attr(link, "href"),
                image=normalize_image_url(_image_src(card.find("img"))),
                year=parse_int(_text(year)) if year else None,
                quality=_text(quality) or None if quality else None,
            ))
        sections.append(HomeSection(id=section_id, title=title, type="grid", items=items))
    return sections


def extract_home_article(html: Markup) -> Optional[HomeArticle]:
    soup = make_soup(html)
    article = soup.find(id="home-article")
    if article is None:
        return None
    paragraphs = [text for text in (_text(p) for p in article.find_all("p")) if text]
    sections = []
    for heading in article.find_all("h2"):
        paragraph = heading.find_next_sibling("p")
        if paragraph is not None:
            sections.append(ArticleSection(heading=_text(heading), content=_text(paragraph)))
    return HomeArticle(intro=paragraphs[:3], sections=sections)


def extract_suggestions(html: Markup) -> List[Suggestion]:
    soup = make_soup(html)
    return [Suggestion(title=_text(a), url=_attr(a, "href")) for a in soup.select("a.item[href]")]


# Series, seasons and episodes

def extract_series_metadata(html: Markup) -> SeriesMetadata:
    soup = make_soup(html)
    article = soup.select_one("article.post.single")
    seasons: Dict[int, SeasonInfo] = {}
    for link in soup.select(".choose-season .sel-temp a[data-season]"):
        number = parse_int(_attr(link, "data-season"))
        if number is not None and number not in seasons:
            seasons[number] = SeasonInfo(season_number=number, name=_text(link))
    available = [seasons[number] for number in sorted(seasons)]
    if article is None:
        return SeriesMetadata(available_seasons=available)

    views = article.select_one(".views span")
    return SeriesMetadata(
        title=_text(article.select_one(".entry-title")),
        image=normalize_image_url(_image_src(article.select_one(".post-thumbnail img"))),
        duration=_text(article.select_one(".duration")).replace("min.", "").strip(),
        year=_text(article.select_one(".year")),
        views=_text(views),
        total_seasons=parse_int(_text(article.select_one(".seasons span")), 0),
        total_episodes=parse_int(_text(article.select_one(".episodes span")), 0),
        rating=_text(article.select_one(".vote .num")),
        description=_text(article.select_one(".description")),
        available_seasons=available,
    )


def extract_episode_list(html: Markup) -> List[Episode]:
    soup = make_soup(html)
    episodes = []
    for li in soup.select("#episode_by_temp li"):
        article = li.find("article") or li
        link = article.select_one("a.lnk-blk") or article.find("a", href=True)
        episodes.append(Episode(
            episode_number=_text(article.select_one(".num-epi")),
            title=_text(article.select_one(".entry-title")),
            image=normalize_image_url(_image_src(article.find("img"))),
            time=_text(article.select_one(".time")),
            url=_attr(link, "href"),
        ))
    return episodes


def extract_season_episodes(html: Markup, season_number: int = 1) -> SeasonData:
    """Episodes of a season page plus season-level categories, tags and cast."""
    soup = make_soup(html)
    article = soup.select_one("article.post.single")
    return SeasonData(
        season_number=season_number,
        episodes=extract_episode_list(soup),
        categories=_named_links(article, ".genres a"),
        tags=_named_links(article, ".tag a"),
        cast=_named_links(article, ".cast-lst a"),
        year=_text(article.select_one(".year")) or None if article is not None else None,
        rating=_text(article.select_one(".vote .num")) or None if article is not None else None,
    )


def extract_season_list(html: Markup) -> List[SeasonOption]:
    soup = make_soup(html)
    seasons = []
    for link in soup.select(".sel-temp a[data-season]"):
        number = parse_int(_attr(link, "data-season"))
        if number is None:
            continue
        seasons.append(SeasonOption(season_number=number, name=_text(link), data_post=_attr(link, "data-post") or None))
    return seasons


def extract_episode_info(html: Markup) -> EpisodeInfo:
    soup = make_soup(html)
    duration = re.search(r"\d+", _text(soup.select_one(".duration")))
    year = re.search(r"\d{4}", _text(soup.select_one(".year")))
    cast_list = soup.select_one(".cast-lst")
    return EpisodeInfo(
        title=_text(soup.select_one("h1.entry-title") or soup.select_one(".entry-title")),
        image=normalize_image_url(_image_src(soup.select_one(".post-thumbnail img"))),
        description=_text(soup.select_one(".description")),
        duration=duration.group(0) if duration else "",
        year=year.group(0) if year else "",
        rating=_text(soup.select_one(".vote .num")),
        categories=_named_links(soup.select_one(".genres"), "a"),
        cast=_named_links(cast_list, "a"),
    )


def extract_episode_navigation(html: Markup) -> EpisodeNavigation:
    soup = make_soup(html)
    navigation = EpisodeNavigation()
    for link in soup.select(".epsdsnv a[href]"):
        text = _text(link)
        href = _attr(link, "href")
        if "Previous" in text and navigation.previous_episode is None:
            navigation.previous_episode = href
        elif "Next" in text and navigation.next_episode is None:
            navigation.next_episode = href
        elif "Seasons" in text and navigation.series_page is None:
            navigation.series_page = href
    return navigation


def _clean_server_name(name: str) -> str:
    for suffix in SERVER_NAME_SUFFIXES:
        name = name.replace(suffix, "")
    return name.strip()


def extract_video_servers(html: Markup) -> List[VideoServer]:
    """
    Player iframes (div#options-N) joined with the server tabs that point at
    them (a[href="#options-N"]). A server without a tab has no name and
    displays as N + 1.
    """
    soup = make_soup(html)
    sources: Dict[int, str] = {}
    for box in soup.select('[id^="options-"]'):
        match = OPTION_ID_RE.match(_attr(box, "id"))
        if not match:
            continue
        iframe = box.find("iframe")
        sources[int(match.group(1))] = _image_src(iframe)

    tabs: Dict[int, dict] = {}
    for link in soup.select(".aa-tbs-video li a[href]"):
        match = OPTION_ID_RE.match(_attr(link, "href").lstrip("#"))
        if not match:
            continue
        number = int(match.group(1))
        label = next((span for span in link.find_all("span") if "server" not in _classes(span)), None)
        tabs[number] = {
            "display_number": parse_int(_text(label), number + 1),
            "name": _clean_server_name(_text(link.select_one(".server"))) or None,
            "target_id": f"options-{number}",
            "is_active": "on" in _classes(link),
        }

    servers = []
    for number in sorted(set(sources) | set(tabs)):
        tab = tabs.get(number, {"display_number": number + 1})
        servers.append(VideoServer(server_number=number, src=sources.get(number, ""), **tab))
    return servers


# Movies

def extract_movie_details(html: Markup) -> MovieDetails:
    soup = make_soup(html)
    poster = soup.select_one(".post-thumbnail img")
    paragraphs = [text for text in (_text(p) for p in soup.select(".description p")) if text]

    language = quality = running_time = None
    for paragraph in paragraphs:
        if "Language:" in paragraph:
            language = re.sub(r"Language:", "", paragraph, flags=re.I).strip()
        if "Quality:" in paragraph:
            quality = re.sub(r"Quality:", "", paragraph, flags=re.I).strip()
        if "Running time:" in paragraph:
            running_time = re.sub(r"Running time:", "", paragraph, flags=re.I).strip()

    directors: List[NamedLink] = []
    cast: List[NamedLink] = []
    for li in soup.select(".cast-lst li"):
        label = _text(li.find("span"))
        if label == "Director":
            directors.extend(_named_links(li, "p a"))
        elif label == "Cast":
            cast.extend(_named_links(li, "p a"))

    rating_labels = soup.select(".vote-cn .vote span")
    return MovieDetails(
        title=_text(soup.select_one(".entry-title")),
        poster_image=normalize_image_url(_image_src(poster)),
        poster_alt=_attr(poster, "alt"),
        backdrop=Backdrop(
            header=normalize_image_url(_image_src(soup.select_one(".bghd .TPostBg"))),
            footer=normalize_image_url(_image_src(soup.select_one(".bgft .TPostBg"))),
        ),
        genres=_named_links(soup, ".entry-meta .genres a"),
        tags=_named_links(soup, ".entry-meta .tag a"),
        duration=_text(soup.select_one(".entry-meta .duration")),
        year=_text(soup.select_one(".entry-meta .year")),
        description=paragraphs[0] if paragraphs else "",
        additional_info=paragraphs[1:],
        language=language,
        quality=quality,
        running_time=running_time,
        directors=directors,
        cast=cast,
        rating=_text(soup.select_one(".vote-cn .vote .num")) or None,
        rating_source=(_text(rating_labels[-1]) if rating_labels else "") or "TMDB",
    )


def extract_video_options(html: Markup) -> VideoOptions:
    """Language tabs, per-language server tabs and player iframes (unresolved)."""
    soup = make_soup(html)
    languages = []
    for element in soup.select(".d-flex-ch.mb-10.btr .btn, .d-flex-ch.mb-10.btr span"):
        label = _text(element)
        if label:
            languages.append(LanguageTab(language=label, tab_id=_attr(element, "tab") or None, active="active" in _classes(element)))

    blocks = []
    for block in soup.select(".lrt"):
        tabs = []
        for li in block.select(".aa-tbs-video li"):
            link = li.find("a")
            if link is None:
                continue
            name = _clean_server_name(_text(link.select_one(".server")))
            tabs.append(ServerTab(
                server_number=_text(link.find("span")),
                server_name=name.replace("Multi Audio", "").strip(),
                target_id=_attr(link, "href").lstrip("#"),
                active="on" in _classes(link),
            ))
        blocks.append(LanguageServers(language_id=_attr(block, "id") or None, active="active" in _classes(block), servers=tabs))

    iframes = []
    for player in soup.select(".video-player .video"):
        iframe = player.find("iframe")
        src = _image_src(iframe)
        iframes.append(PlayerIframe(option_id=_attr(player, "id") or None, active="on" in _classes(player), original_src=src, src=src))
    return VideoOptions(languages=languages, servers=blocks, iframes=iframes)


def extract_comments(html: Markup) -> List[Comment]:
    soup = make_soup(html)
    comments = []
    for element in soup.select(".comment-list .comment"):
        time_tag = element.select_one(".comment-metadata time")
        comments.append(Comment(
            id=_attr(element, "id") or None,
            author=_text(element.select_one(".comment-author .fn")),
            avatar=_attr(element.select_one(".comment-author img"), "src"),
            date=_attr(time_tag, "datetime"),
            date_text=_text(time_tag),
            content=" ".join(_text(p) for p in element.select(".comment-content p")).strip(),
            url=_attr(element.select_one(".comment-metadata a"), "href"),
        ))
    return comments


def extract_related(html: Markup) -> List[RelatedItem]:
    soup = make_soup(html)
    related = []
    for article in soup.select(".section.episodes .carousel article"):
        img = article.find("img")
        related.append(RelatedItem(
            title=_text(article.select_one(".entry-title")),
            image=normalize_image_url(_image_src(img)),
            image_alt=_attr(img, "alt"),
            url=_attr(article.select_one(".lnk-blk"), "href"),
            rating=_rating(_text(article.select_one(".vote"))),
        ))
    return related


# Embeds

def extract_iframe_src(html: Markup) -> Optional[str]:
    """First player iframe: `.Video iframe` before any iframe, src before data-src."""
    soup = make_soup(html)
    player = soup.select_one(".Video iframe")
    first = soup.find("iframe")
    for iframe, attribute in ((player, "src"), (first, "src"), (player, "data-src"), (first, "data-src")):
        value = _attr(iframe, attribute)
        if value:
            return value
    return None


def extract_all_iframes(html: Markup) -> List[IframeInfo]:
    soup = make_soup(html)
    iframes = []
    for iframe in soup.find_all("iframe"):
        src = _image_src(iframe)
        if not src:
            continue
        iframes.append(IframeInfo(
            src=src,
            width=_attr(iframe, "width") or None,
            height=_attr(iframe, "height") or None,
            allowfullscreen=iframe.has_attr("allowfullscreen"),
            frameborder=_attr(iframe, "frameborder") or "0",
        ))
    return iframes


VIEW_EXTRACTORS = {
    View.PAGINATION: extract_pagination,
    View.SCHEDULE: extract_schedule,
    View.MENU: extract_menu,
    View.FOOTER: extract_footer,
    View.SERIES_METADATA: extract_series_metadata,
    View.SEASON_EPISODES: extract_season_episodes,
    View.VIDEO_SERVERS: extract_video_servers,
    View.META_TAGS: extract_meta_tags,
    View.IFRAME_SRC: extract_iframe_src,
    View.CATEGORY_TABS: extract_category_tabs,
    View.ALPHABET_NAV: extract_alphabet_nav,
    View.HOME_SECTIONS: extract_home_sections,
    View.LOGO: extract_logo,
    View.COPYRIGHT: extract_copyright,
}


def extract_view(html: Markup, view: Union[View, str], section: Optional[Union[ListingSection, str]] = None):
    """
    Run the extractor registered for a view. Raises ValueError for an unknown
    view or listing section.
    """
    view = View(view)
    if view == View.CONTENT_LIST:
        return extract_content_list(html, ListingSection(section or ListingSection.MAIN))
    return VIEW_EXTRACTORS[view](html)
