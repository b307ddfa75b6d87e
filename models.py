# models.py
from pydantic import BaseModel, Field, model_serializer
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional

from normalizers import ContentType


class ApiModel(BaseModel):
    """Base for every response record; serialized with camelCase keys."""

    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel


class MediaItem(ApiModel):
    id: str = Field(default="", description="Listing entry id, e.g. post-123")
    title: str = Field(default="", description="Title")
    image: Optional[str] = Field(default=None, description="Absolute poster URL")
    image_alt: str = Field(default="", description="Poster alt text")
    url: str = Field(default="", description="Detail page URL")
    rating: Optional[str] = Field(default=None, description="TMDB rating")
    content_type: ContentType = Field(default=ContentType.UNKNOWN, description="movie, series, post or unknown")
    categories: List[str] = Field(default_factory=list, description="Categories from class tokens")
    tags: List[str] = Field(default_factory=list, description="Tags from class tokens")
    cast: List[str] = Field(default_factory=list, description="At most 10 cast members")
    directors: List[str] = Field(default_factory=list, description="Directors")
    countries: List[str] = Field(default_factory=list, description="Countries")
    letters: List[str] = Field(default_factory=list, description="Alphabet index letters")
    year: Optional[str] = Field(default=None, description="Release year")


class CompactMovie(ApiModel):
    id: str = Field(default="", description="Slug taken from the URL")
    title: str = Field(default="", description="Movie title")
    url: str = Field(default="", description="Movie page URL")
    poster: Optional[str] = Field(default=None, description="Poster URL")


class PageLink(ApiModel):
    page: int = Field(..., description="Page number")
    url: Optional[str] = Field(default=None, description="Page URL")
    current: bool = Field(default=False, description="Whether this is the current page")


class PaginationInfo(ApiModel):
    current_page: int = Field(default=1, ge=1, description="Current page")
    total_pages: int = Field(default=1, ge=1, description="Highest page number seen")
    has_next_page: bool = Field(default=False, description="A NEXT link exists")
    has_prev_page: bool = Field(default=False, description="A PREV link exists")
    next_page_url: Optional[str] = Field(default=None, description="NEXT link")
    prev_page_url: Optional[str] = Field(default=None, description="PREV link")
    pages: List[PageLink] = Field(default_factory=list, description="Numbered page links")


class ScheduleEntry(ApiModel):
    time: str = Field(default="", description="Air time")
    show: str = Field(default="", description="Show description")


class MenuLink(ApiModel):
    id: Optional[int] = Field(default=None, description="WordPress menu item id")
    title: str = Field(default="", description="Link text")
    url: str = Field(default="", description="Link target")


class MenuItem(MenuLink):
    has_children: bool = Field(default=False, description="Item owns a submenu")
    children: List[MenuLink] = Field(default_factory=list, description="Submenu items")


class FooterItem(MenuLink):
    rel: Optional[str] = Field(default=None, description="Link rel attribute")


class NamedLink(ApiModel):
    name: str = Field(default="", description="Display name")
    url: str = Field(default="", description="Link target")


class SeasonInfo(ApiModel):
    season_number: int = Field(..., description="Season number")
    name: str = Field(default="", description="Season label")


class SeasonOption(SeasonInfo):
    data_post: Optional[str] = Field(default=None, description="Post id used by the season selector")


class SeriesMetadata(ApiModel):
    title: str = Field(default="", description="Series title")
    image: Optional[str] = Field(default=None, description="Poster URL")
    duration: str = Field(default="", description="Episode duration in minutes")
    year: str = Field(default="", description="Release year")
    views: str = Field(default="", description="View count")
    total_seasons: int = Field(default=0, description="Season count shown on the page")
    total_episodes: int = Field(default=0, description="Episode count shown on the page")
    rating: str = Field(default="", description="TMDB rating")
    description: str = Field(default="", description="Synopsis")
    available_seasons: List[SeasonInfo] = Field(default_factory=list, description="Seasons in the selector, ascending")


class VideoServer(ApiModel):
    server_number: int = Field(..., description="0-based server index")
    display_number: int = Field(..., description="1-based number shown on the tab")
    name: Optional[str] = Field(default=None, description="Server name from the tab")
    src: str = Field(default="", description="Player iframe URL")
    target_id: Optional[str] = Field(default=None, description="Tab target, e.g. options-0")
    is_active: bool = Field(default=False, description="Server selected by default")


class Episode(ApiModel):
    episode_number: str = Field(default="", description="Episode label, e.g. 1x3")
    title: str = Field(default="", description="Episode title")
    image: Optional[str] = Field(default=None, description="Thumbnail URL")
    time: str = Field(default="", description="Air date text")
    url: str = Field(default="", description="Episode page URL")
    servers: Optional[List[VideoServer]] = Field(default=None, description="Video servers, only when requested")

    @model_serializer(mode="wrap")
    def _omit_unrequested_servers(self, handler):
        data = handler(self)
        if self.servers is None:
            data.pop("servers", None)
        return data


class SeasonData(ApiModel):
    season_number: int = Field(..., description="Season number")
    episodes: List[Episode] = Field(default_factory=list, description="Episodes of the season")
    categories: List[NamedLink] = Field(default_factory=list, description="Season categories")
    tags: List[NamedLink] = Field(default_factory=list, description="Season tags")
    cast: List[NamedLink] = Field(default_factory=list, description="Season cast")
    year: Optional[str] = Field(default=None, description="Season year")
    rating: Optional[str] = Field(default=None, description="Season rating")
    error: Optional[str] = Field(default=None, description="Fetch error for this season")


class CategoryTab(ApiModel):
    label: str = Field(default="", description="Tab label")
    url: str = Field(default="", description="Tab URL")
    active: bool = Field(default=False, description="Currently selected tab")
    type: str = Field(default="movies-series", description="Content filter of the tab")


class AlphabetLink(ApiModel):
    letter: str = Field(default="", description="Letter label")
    url: str = Field(default="", description="Letter index URL")
    active: bool = Field(default=False, description="Currently selected letter")


class HomeItem(ApiModel):
    title: str = Field(default="", description="Title")
    slug: Optional[str] = Field(default=None, description="Series slug when the link is a series")
    url: str = Field(default="", description="Detail page URL")
    image: Optional[str] = Field(default=None, description="Image URL")
    description: Optional[str] = Field(default=None, description="Slider description")
    year: Optional[int] = Field(default=None, description="Release year")
    quality: Optional[str] = Field(default=None, description="Quality badge")


class HomeSection(ApiModel):
    id: str = Field(..., description="Section element id")
    title: Optional[str] = Field(default=None, description="Section heading")
    type: str = Field(default="grid", description="slider or grid")
    items: List[HomeItem] = Field(default_factory=list, description="Section items")


class EpisodeInfo(ApiModel):
    title: str = Field(default="", description="Episode title")
    image: Optional[str] = Field(default=None, description="Thumbnail URL")
    description: str = Field(default="", description="Synopsis")
    duration: str = Field(default="", description="Duration in minutes")
    year: str = Field(default="", description="Year")
    rating: str = Field(default="", description="Rating")
    categories: List[NamedLink] = Field(default_factory=list, description="Categories")
    cast: List[NamedLink] = Field(default_factory=list, description="Cast")


class EpisodeNavigation(ApiModel):
    previous_episode: Optional[str] = Field(default=None, description="Previous episode URL")
    next_episode: Optional[str] = Field(default=None, description="Next episode URL")
    series_page: Optional[str] = Field(default=None, description="Series page URL")


class Backdrop(ApiModel):
    header: Optional[str] = Field(default=None, description="Header backdrop")
    footer: Optional[str] = Field(default=None, description="Footer backdrop")


class MovieDetails(ApiModel):
    title: str = Field(default="", description="Movie title")
    poster_image: Optional[str] = Field(default=None, description="Poster URL")
    poster_alt: str = Field(default="", description="Poster alt text")
    backdrop: Backdrop = Field(default_factory=Backdrop, description="Backdrop images")
    genres: List[NamedLink] = Field(default_factory=list, description="Genres")
    tags: List[NamedLink] = Field(default_factory=list, description="Tags")
    duration: str = Field(default="", description="Duration")
    year: str = Field(default="", description="Year")
    description: str = Field(default="", description="First description paragraph")
    additional_info: List[str] = Field(default_factory=list, description="Remaining description paragraphs")
    language: Optional[str] = Field(default=None, description="Language line")
    quality: Optional[str] = Field(default=None, description="Quality line")
    running_time: Optional[str] = Field(default=None, description="Running time line")
    directors: List[NamedLink] = Field(default_factory=list, description="Directors")
    cast: List[NamedLink] = Field(default_factory=list, description="Cast")
    rating: Optional[str] = Field(default=None, description="Rating")
    rating_source: str = Field(default="TMDB", description="Rating source")


class LanguageTab(ApiModel):
    language: str = Field(..., description="Language label")
    tab_id: Optional[str] = Field(default=None, description="Tab id")
    active: bool = Field(default=False, description="Selected language")


class ServerTab(ApiModel):
    server_number: str = Field(default="", description="Number on the tab")
    server_name: str = Field(default="", description="Server name")
    target_id: str = Field(default="", description="Tab target id")
    active: bool = Field(default=False, description="Selected server")


class LanguageServers(ApiModel):
    language_id: Optional[str] = Field(default=None, description="Language block id")
    active: bool = Field(default=False, description="Selected language block")
    servers: List[ServerTab] = Field(default_factory=list, description="Servers for the language")


class PlayerIframe(ApiModel):
    option_id: Optional[str] = Field(default=None, description="Player option id")
    active: bool = Field(default=False, description="Selected player")
    original_src: str = Field(default="", description="Iframe URL on the page")
    src: str = Field(default="", description="Resolved player URL")


class VideoOptions(ApiModel):
    languages: List[LanguageTab] = Field(default_factory=list, description="Language tabs")
    servers: List[LanguageServers] = Field(default_factory=list, description="Servers per language")
    iframes: List[PlayerIframe] = Field(default_factory=list, description="Player iframes")


class Comment(ApiModel):
    id: Optional[str] = Field(default=None, description="Comment element id")
    author: str = Field(default="", description="Author name")
    avatar: str = Field(default="", description="Avatar URL")
    date: str = Field(default="", description="ISO date")
    date_text: str = Field(default="", description="Displayed date")
    content: str = Field(default="", description="Comment text")
    url: str = Field(default="", description="Permalink")


class RelatedItem(ApiModel):
    title: str = Field(default="", description="Title")
    image: Optional[str] = Field(default=None, description="Image URL")
    image_alt: str = Field(default="", description="Image alt text")
    url: str = Field(default="", description="Detail page URL")
    rating: Optional[str] = Field(default=None, description="Rating")


class Logo(ApiModel):
    url: str = Field(default="", description="Logo link")
    image: Optional[str] = Field(default=None, description="Logo image")
    alt: str = Field(default="", description="Logo alt text")


class Copyright(ApiModel):
    disclaimer: str = Field(default="", description="Disclaimer paragraph")
    copyright: str = Field(default="", description="Copyright line")


class ArticleSection(ApiModel):
    heading: str = Field(default="", description="Heading")
    content: str = Field(default="", description="Paragraph after the heading")


class HomeArticle(ApiModel):
    intro: List[str] = Field(default_factory=list, description="First paragraphs")
    sections: List[ArticleSection] = Field(default_factory=list, description="Headed sections")


class Suggestion(ApiModel):
    title: str = Field(default="", description="Suggested title")
    url: str = Field(default="", description="Suggestion URL")


class IframeInfo(ApiModel):
    src: str = Field(..., description="Iframe source")
    width: Optional[str] = Field(default=None, description="Width attribute")
    height: Optional[str] = Field(default=None, description="Height attribute")
    allowfullscreen: bool = Field(default=False, description="allowfullscreen present")
    frameborder: str = Field(default="0", description="frameborder attribute")


Schedule = Dict[str, List[ScheduleEntry]]


class ErrorResponse(BaseModel):
    success: bool = Field(default=False, description="Always false")
    error: str = Field(..., description="Error message")
