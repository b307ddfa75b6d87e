from normalizers import (
    ALL,
    CATEGORY_PREFIX,
    LATEST,
    LETTERS_PREFIX,
    ContentType,
    clean_text,
    content_type_from_tokens,
    decode_cast,
    decode_class_tokens,
    decode_directors,
    decode_year,
    extract_languages,
    normalize_image_url,
    parse_int,
    parse_page_range_spec,
    resolve_season_numbers,
)


def test_normalize_image_url():
    assert normalize_image_url("//img.example.com/w200/x.jpg") == "https://img.example.com/w500/x.jpg"
    assert normalize_image_url(None) is None
    assert normalize_image_url("") is None
    assert normalize_image_url("https://a/b.jpg") == "https://a/b.jpg"
    assert normalize_image_url("https://image.tmdb.org/t/p/original/x.jpg") == "https://image.tmdb.org/t/p/original/x.jpg"


def test_decode_class_tokens():
    assert decode_class_tokens("category-action category-comedy tag-funny", CATEGORY_PREFIX) == ["action", "comedy"]
    assert decode_class_tokens("category-slice-of-life", CATEGORY_PREFIX) == ["slice of life"]
    assert decode_class_tokens(["letters-a", "letters-0-9"], LETTERS_PREFIX, humanize=False) == ["a", "0-9"]
    assert decode_class_tokens(None, CATEGORY_PREFIX) == []
    # prefix must start the token
    assert decode_class_tokens("subcategory-action", CATEGORY_PREFIX) == []


def test_content_type_from_tokens():
    assert content_type_from_tokens("post-1 type-series") == ContentType.SERIES
    assert content_type_from_tokens("type-movies") == ContentType.MOVIE
    assert content_type_from_tokens("type-movie") == ContentType.MOVIE
    assert content_type_from_tokens(["type-post"]) == ContentType.POST
    assert content_type_from_tokens("series category-action") == ContentType.UNKNOWN


def test_cast_prefix_order_depends_on_content_type():
    tokens = "cast-john-roe cast_tv-jane-doe"
    assert decode_cast(tokens, ContentType.SERIES) == ["jane doe", "john roe"]
    assert decode_cast(tokens, ContentType.MOVIE) == ["john roe", "jane doe"]
    assert decode_cast("cast-a cast_tv-a", ContentType.SERIES) == ["a"]


def test_cast_is_capped_at_ten():
    tokens = " ".join(f"cast-person-{n}" for n in range(15))
    cast = decode_cast(tokens, ContentType.MOVIE)
    assert len(cast) == 10
    assert cast[0] == "person 0"


def test_decode_directors_accepts_both_spellings():
    assert decode_directors("director-ken-ito directors_tv-ana-li", ContentType.SERIES) == ["ana li", "ken ito"]
    assert decode_directors("directors-hayao-miyazaki", ContentType.MOVIE) == ["hayao miyazaki"]


def test_decode_year():
    assert decode_year("type-movies annee-2019") == "2019"
    assert decode_year("type-movies") is None


def test_parse_page_range_spec():
    assert parse_page_range_spec("2,4-6", 10) == [2, 4, 5, 6]
    assert parse_page_range_spec("all", 10) == ALL
    assert parse_page_range_spec("ALL") == ALL
    assert parse_page_range_spec("latest") == LATEST
    assert parse_page_range_spec(None) == [1]
    assert parse_page_range_spec("  ") == [1]
    assert parse_page_range_spec("6-4") == []
    assert parse_page_range_spec("1,6-4", 10) == [1]
    assert parse_page_range_spec("0,3,3,12", 10) == [3]
    assert parse_page_range_spec("8-20", 10) == [8, 9, 10]
    assert parse_page_range_spec("x,2") == [2]


def test_resolve_season_numbers():
    assert resolve_season_numbers(ALL, [3, 1, 2]) == [1, 2, 3]
    assert resolve_season_numbers(LATEST, [3, 1, 2]) == [3]
    assert resolve_season_numbers([1, 4], [1, 2, 3]) == [1]
    assert resolve_season_numbers(LATEST, []) == []


def test_parse_int():
    assert parse_int("3 Seasons") == 3
    assert parse_int("none", 0) == 0
    assert parse_int(None) is None


def test_clean_text():
    assert clean_text("  Attack \n on\tTitan ") == "Attack on Titan"
    assert clean_text(None) == ""


def test_extract_languages():
    categories = [
        {"name": "Action", "url": "https://toon.test/category/action/"},
        {"name": "Hindi Language", "url": "https://toon.test/category/language/hindi-language/"},
        {"name": "Japanese", "url": "https://toon.test/category/japanese/"},
    ]
    assert extract_languages(categories) == ["Hindi", "Japanese"]


def test_large_range_is_clamped_to_total():
    assert parse_page_range_spec("1-1000000000", 3) == [1, 2, 3]
    assert parse_page_range_spec("2-1000000000,1", 0) == []
