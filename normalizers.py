# normalizers.py
"""
Small pure transforms applied to raw strings pulled out of toonstream markup:
image URL fixups, class-token decoding, page/season range parsing and
content-type inference.
"""
import re
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union

from config import MAX_CAST, PREFERRED_IMAGE_SIZE

# Class-token prefixes used on listing entries (li#post-N)
CATEGORY_PREFIX = r"category-"
TAG_PREFIX = r"tag-"
CAST_PREFIX = r"cast-"
CAST_TV_PREFIX = r"cast_tv-"
DIRECTORS_PREFIX = r"directors?-"
DIRECTORS_TV_PREFIX = r"directors?_tv-"
COUNTRY_PREFIX = r"country-"
LETTERS_PREFIX = r"letters-"

ALL = "all"
LATEST = "latest"

THUMBNAIL_SIZE_RE = re.compile(r"/w\d+/")
YEAR_TOKEN_RE = re.compile(r"^annee-(\d+)$")

LANGUAGE_KEYWORDS = [
    "English", "Hindi", "Japanese", "Spanish", "French", "German", "Italian",
    "Portuguese", "Chinese", "Korean", "Tamil", "Telugu", "Malayalam", "Bengali",
    "Marathi", "Gujarati", "Kannada", "Punjabi", "Urdu", "Arabic", "Russian",
    "Thai", "Vietnamese", "Indonesian", "Malay", "Turkish", "Polish", "Dutch",
    "Swedish", "Norwegian", "Danish", "Finnish", "Greek", "Hebrew", "Czech",
    "Hungarian", "Romanian", "Ukrainian", "Persian", "Farsi",
]


class ContentType(str, Enum):
    MOVIE = "movie"
    SERIES = "series"
    POST = "post"
    UNKNOWN = "unknown"


def clean_text(value: Optional[str]) -> str:
    """Collapse runs of whitespace and strip the ends."""
    if not value:
        return ""
    return re.sub(r"\s+", " ", value).strip()


def normalize_image_url(raw: Optional[str]) -> Optional[str]:
    """
    Make an image URL absolute and request the preferred thumbnail size.
    Examples:
        //img.example.com/w200/x.jpg -> https://img.example.com/w500/x.jpg
        https://a/b.jpg -> https://a/b.jpg
        None -> None
    """
    if not raw:
        return None
    url = raw.strip()
    if not url:
        return None
    if url.startswith("//"):
        url = "https:" + url
    return THUMBNAIL_SIZE_RE.sub(f"/{PREFERRED_IMAGE_SIZE}/", url)


def split_class_tokens(class_value: Union[str, Sequence[str], None]) -> List[str]:
    if not class_value:
        return []
    if isinstance(class_value, str):
        return class_value.split()
    return [token for item in class_value for token in str(item).split()]


def decode_class_tokens(class_value: Union[str, Sequence[str], None], prefix_pattern: str, humanize: bool = True) -> List[str]:
    """
    Return the values of every class token starting with prefix_pattern.
    The prefix is stripped and, when humanize is set, hyphens become spaces:
        "category-action cast-jane-doe", CAST_PREFIX -> ["jane doe"]
    """
    token_re = re.compile(rf"^(?:{prefix_pattern})([\w-]+)$")
    values = []
    for token in split_class_tokens(class_value):
        match = token_re.match(token)
        if not match:
            continue
        value = match.group(1)
        values.append(value.replace("-", " ") if humanize else value)
    return values


def decode_year(class_value: Union[str, Sequence[str], None]) -> Optional[str]:
    for token in split_class_tokens(class_value):
        match = YEAR_TOKEN_RE.match(token)
        if match:
            return match.group(1)
    return None


def content_type_from_tokens(class_value: Union[str, Sequence[str], None]) -> ContentType:
    tokens = set(split_class_tokens(class_value))
    if "type-series" in tokens:
        return ContentType.SERIES
    if "type-movies" in tokens or "type-movie" in tokens:
        return ContentType.MOVIE
    if "type-post" in tokens:
        return ContentType.POST
    return ContentType.UNKNOWN


def _dedupe(values: Iterable[str]) -> List[str]:
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def decode_people(class_value: Union[str, Sequence[str], None], content_type: ContentType, plain_prefix: str, tv_prefix: str) -> List[str]:
    """
    Cast and director tokens come in a plain and a `_tv` spelling.
    Series try the `_tv` spelling first, everything else the plain one.
    """
    prefixes = [tv_prefix, plain_prefix] if content_type == ContentType.SERIES else [plain_prefix, tv_prefix]
    values = []
    for prefix in prefixes:
        values.extend(decode_class_tokens(class_value, prefix))
    return _dedupe(values)


def decode_cast(class_value: Union[str, Sequence[str], None], content_type: ContentType) -> List[str]:
    return decode_people(class_value, content_type, CAST_PREFIX, CAST_TV_PREFIX)[:MAX_CAST]


def decode_directors(class_value: Union[str, Sequence[str], None], content_type: ContentType) -> List[str]:
    return decode_people(class_value, content_type, DIRECTORS_PREFIX, DIRECTORS_TV_PREFIX)


def parse_int(value: Optional[str], default: Optional[int] = None) -> Optional[int]:
    """Leading integer of a string ("3 Seasons" -> 3), or default."""
    if value is None:
        return default
    match = re.search(r"-?\d+", str(value))
    return int(match.group(0)) if match else default


def parse_page_range_spec(spec: Optional[str], total: Optional[int] = None) -> Union[List[int], str]:
    """
    Parse a comma separated list of numbers and inclusive ranges.
    Examples:
        "2,4-6" -> [2, 4, 5, 6]
        "all" -> "all"
        "latest" -> "latest"
        "" or None -> [1]
    Numbers below 1 are ignored. When total is given, numbers above it are
    ignored too.
    """
    if spec is None or not str(spec).strip():
        return [1]
    spec = str(spec).strip()
    if spec.lower() == ALL:
        return ALL
    if spec.lower() == LATEST:
        return LATEST

    numbers = set()
    for part in spec.split(","):
        part = part.strip()
        if not part:
            continue
        range_match = re.match(r"^(\d+)\s*-\s*(\d+)$", part)
        if range_match:
            start, end = int(range_match.group(1)), int(range_match.group(2))
            if total is not None:
                end = min(end, total)
            # reversed ranges ("5-2") select nothing
            if start <= end:
                numbers.update(range(start, end + 1))
        elif part.isdigit():
            numbers.add(int(part))

    return sorted(n for n in numbers if n >= 1 and (total is None or n <= total))


def resolve_season_numbers(spec: Union[List[int], str], available: Sequence[int]) -> List[int]:
    """Resolve a parsed range spec against the available season numbers."""
    available = sorted(set(available))
    if spec == ALL:
        return available
    if spec == LATEST:
        return available[-1:]
    return [n for n in spec if n in available]


def extract_languages(categories: Iterable[dict]) -> List[str]:
    """Languages named by category links (either /language/ links or exact names)."""
    languages = []
    for category in categories:
        name = (category.get("name") or "").lower()
        url = (category.get("url") or "").lower()
        for language in LANGUAGE_KEYWORDS:
            key = language.lower()
            is_language_link = ("/language/" in url or "/lang/" in url) and key in name
            if (is_language_link or name == key) and language not in languages:
                languages.append(language)
    return languages
