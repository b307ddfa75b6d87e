import re

import httpx
import pytest
from fastapi import Depends
from fastapi.testclient import TestClient

from app import app, get_config_resolver
from remote_config import ConfigCache, RemoteConfigResolver
from scraper import get_http_client

BASE_URL = "https://toon.test"
BASE_URL_SOURCE = "https://config.test/baseurl.txt"
PROXY_URL_SOURCE = "https://config.test/proxy.txt"


def listing_entry(post_id, title, classes, href, image="//image.tmdb.org/t/p/w185/poster.jpg", rating="8.7"):
    return f"""
    <li id="post-{post_id}" class="post-{post_id} {classes}">
      <article class="post dfx fcl movies">
        <header class="entry-header">
          <h2 class="entry-title">{title}</h2>
          <div class="entry-meta"><span class="vote"><span>TMDB</span> {rating}</span></div>
        </header>
        <div class="post-thumbnail or-1"><figure><img loading="lazy" src="{image}" alt="Image {title}"></figure></div>
        <a href="{href}" class="lnk-blk"></a>
      </article>
    </li>"""


LISTING_HTML = f"""
<html><head><title>Series - Toonstream</title></head>
<body class="archive">
  <div class="section movies" id="movies-a">
    <header><h1 class="section-title">Latest Series</h1></header>
    <ul class="post-lst rw sm rcl2 rcl3a rcl4b rcl3c rcl4d rcl6e">
      {listing_entry(101, "Attack on Titan",
                     "series type-series category-action category-anime tag-funny cast_tv-jane-doe cast-john-roe "
                     "directors_tv-ken-ito country-japan letters-a annee-2013",
                     BASE_URL + "/series/attack-on-titan/")}
      {listing_entry(102, "Spirited Away",
                     "movies type-movies category-fantasy cast-chihiro-ogino directors-hayao-miyazaki annee-2001",
                     BASE_URL + "/movies/spirited-away/", image="https://image.tmdb.org/t/p/original/sa.jpg")}
      {listing_entry(103, "Weekly Notes", "post type-post category-news", BASE_URL + "/weekly-notes/", image="")}
    </ul>
    <nav class="navigation pagination">
      <div class="nav-links">
        <a class="page-link" href="{BASE_URL}/series/">PREV</a>
        <a class="page-link" href="{BASE_URL}/series/">1</a>
        <span class="page-link current">2</span>
        <a class="page-link" href="{BASE_URL}/series/page/3/">3</a>
        <span class="extend">...</span>
        <a class="page-link" href="{BASE_URL}/series/page/7/">7</a>
        <a class="page-link" href="{BASE_URL}/series/page/3/">NEXT</a>
      </div>
    </nav>
  </div>
  <aside class="sidebar">
    <section id="widget_list_movies_series-4" class="widget">
      <ul class="post-lst">
        {listing_entry(201, "Naruto", "series type-series category-anime", BASE_URL + "/series/naruto/")}
      </ul>
    </section>
    <section id="widget_list_movies_series-5" class="widget">
      <ul class="post-lst">
        {listing_entry(301, "Your Name", "movies type-movies category-romance", BASE_URL + "/movies/your-name/")}
        {listing_entry(302, "Akira", "movies type-movies category-action", BASE_URL + "/movies/akira/")}
      </ul>
    </section>
  </aside>
  <div id="monday"><div class="custom-schedule-item"><span class="schedule-time">09:00 AM</span><p class="schedule-description">One Piece Episode 1100</p></div></div>
  <div id="friday"><div class="custom-schedule-item"><span class="schedule-time">06:30 PM</span><p class="schedule-description">Naruto Shippuden</p></div></div>
</body></html>
"""

SITE_CHROME_HTML = f"""
<html><body>
  <header>
    <figure class="logo"><a href="{BASE_URL}/home/"><img src="//toon.test/logo.png" alt="Toonstream"></a></figure>
    <ul class="menu dfxc dv or-1">
      <li id="menu-item-10" class="menu-item"><a href="{BASE_URL}/home/">Home</a></li>
      <li id="menu-item-11" class="menu-item menu-item-has-children"><a href="#">Languages</a>
        <ul class="sub-menu">
          <li id="menu-item-12" class="menu-item"><a href="{BASE_URL}/category/language/hindi-language/">Hindi</a></li>
          <li id="menu-item-13" class="menu-item"><a href="{BASE_URL}/category/language/tamil-language/">Tamil</a></li>
        </ul>
      </li>
    </ul>
  </header>
  <footer>
    <nav class="top dfxc alg-cr">
      <ul class="menu">
        <li id="menu-item-20"><a href="{BASE_URL}/dmca/" rel="nofollow">DMCA</a></li>
        <li id="menu-item-21"><a href="{BASE_URL}/contact/">Contact</a></li>
      </ul>
    </nav>
    <center>
      <p>We do not host any files on our server.</p>
      <p>Copyright 2025 Toonstream. All rights reserved.</p>
    </center>
  </footer>
</body></html>
"""

SERIES_HTML = """
<html><head><meta name="description" content="Watch Attack on Titan"></head><body>
  <article class="post single">
    <h1 class="entry-title">Attack on Titan</h1>
    <div class="post-thumbnail"><img src="//image.tmdb.org/t/p/w300/aot.jpg" alt="Attack on Titan"></div>
    <span class="duration">24 min.</span>
    <span class="year">2013</span>
    <span class="views"><span>1.2M</span></span>
    <span class="seasons"><span>3</span> Seasons</span>
    <span class="episodes"><span>75</span> Episodes</span>
    <div class="vote"><span class="num">8.7</span></div>
    <div class="description"><p>Humanity fights the titans.</p></div>
  </article>
  <div class="choose-season">
    <ul class="sel-temp">
      <li><a data-season="2" data-post="55" href="#">Season 2</a></li>
      <li><a data-season="1" data-post="55" href="#">Season 1</a></li>
      <li><a data-season="3" data-post="55" href="#">Season 3</a></li>
    </ul>
  </div>
</body></html>
"""


def season_html(season_number, episode_count=2, slug="attack-on-titan"):
    episodes = "".join(
        f"""
        <li><article class="post dfx fcl episodes">
          <div class="post-thumbnail"><img src="//image.tmdb.org/t/p/w185/s{season_number}e{n}.jpg"></div>
          <header class="entry-header">
            <span class="num-epi">{season_number}x{n}</span>
            <h2 class="entry-title">Episode {n}</h2>
            <span class="time">2 years ago</span>
          </header>
          <a href="{BASE_URL}/episode/{slug}-{season_number}x{n}/" class="lnk-blk"></a>
        </article></li>"""
        for n in range(1, episode_count + 1)
    )
    return f"""
<html><body class="single postid-{900 + season_number}">
  <article class="post single">
    <h1 class="entry-title">Attack on Titan {season_number}x1</h1>
    <div class="post-thumbnail"><img src="//image.tmdb.org/t/p/w300/ep.jpg"></div>
    <span class="duration">24 min</span>
    <span class="year">2013</span>
    <div class="vote"><span class="num">8.{season_number}</span></div>
    <div class="description"><p>Season {season_number} opener.</p></div>
    <span class="genres"><a href="{BASE_URL}/category/action/">Action</a> <a href="{BASE_URL}/category/language/hindi-language/">Hindi</a></span>
    <span class="tag"><a href="{BASE_URL}/tag/titans/">titans</a></span>
    <ul class="cast-lst"><li><a href="{BASE_URL}/cast/jane-doe/">Jane Doe</a></li></ul>
  </article>
  <div class="choose-season">
    <ul class="sel-temp">
      <li><a data-season="1" data-post="55" href="#">Season 1</a></li>
      <li><a data-season="2" data-post="55" href="#">Season 2</a></li>
      <li><a data-season="3" data-post="55" href="#">Season 3</a></li>
    </ul>
  </div>
  <ul id="episode_by_temp">{episodes}</ul>
  <div class="epsdsnv">
    <a href="{BASE_URL}/episode/{slug}-{season_number}x0/">Previous</a>
    <a href="{BASE_URL}/series/{slug}/">Seasons</a>
    <a href="{BASE_URL}/episode/{slug}-{season_number}x2/">Next</a>
  </div>
  <div class="video aa-tb on" id="options-0"><iframe data-src="https://player.test/e/{season_number}-0"></iframe></div>
  <div class="video aa-tb" id="options-1"><iframe src="https://player.test/e/{season_number}-1"></iframe></div>
  <ul class="aa-tbs aa-tbs-video">
    <li><a class="btn on" href="#options-0"><span>1</span><span class="server">Ruby-Multi Audio</span></a></li>
  </ul>
</body></html>
"""


MOVIE_HTML = f"""
<html><body class="movies-template-default single postid-4242">
  <div class="bghd"><img class="TPostBg" src="//image.tmdb.org/t/p/w1280/bg.jpg"></div>
  <article class="post single">
    <div class="post-thumbnail"><img src="//image.tmdb.org/t/p/w185/sa.jpg" alt="Spirited Away"></div>
    <h1 class="entry-title">Spirited Away</h1>
    <div class="entry-meta">
      <span class="genres"><a href="{BASE_URL}/category/fantasy/">Fantasy</a></span>
      <span class="tag"><a href="{BASE_URL}/tag/ghibli/">ghibli</a></span>
      <span class="duration">125 min</span>
      <span class="year">2001</span>
    </div>
    <div class="description">
      <p>A girl wanders into the spirit world.</p>
      <p>Language: Hindi - Japanese</p>
      <p>Quality: 1080p</p>
    </div>
    <ul class="cast-lst">
      <li><span>Director</span><p><a href="{BASE_URL}/director/hayao-miyazaki/">Hayao Miyazaki</a></p></li>
      <li><span>Cast</span><p><a href="{BASE_URL}/cast/rumi-hiiragi/">Rumi Hiiragi</a></p></li>
    </ul>
  </article>
  <div class="vote-cn"><div class="vote"><span class="num">8.5</span><span>TMDB</span></div></div>
  <div class="video-player">
    <div class="video aa-tb on" id="options-0"><iframe data-src="https://player.test/movie/embed/1"></iframe></div>
    <div class="video aa-tb" id="options-1"><iframe src="https://broken.test/embed/2"></iframe></div>
  </div>
  <div class="lrt active" id="lang-hindi">
    <ul class="aa-tbs aa-tbs-video">
      <li><a class="btn on" href="#options-0"><span>1</span><span class="server">Ruby-Hindi-Eng</span></a></li>
      <li><a class="btn" href="#options-1"><span>2</span><span class="server">Cloud-Multi Audio</span></a></li>
    </ul>
  </div>
  <ol class="comment-list">
    <li id="comment-7" class="comment">
      <div class="comment-author"><img src="https://avatar.test/a.png"><b class="fn">Mei</b></div>
      <div class="comment-metadata"><a href="{BASE_URL}/movies/spirited-away/#comment-7"><time datetime="2024-05-01T10:00:00+00:00">May 1, 2024</time></a></div>
      <div class="comment-content"><p>Classic.</p></div>
    </li>
  </ol>
  <section class="section episodes">
    <div class="carousel">
      <article><h2 class="entry-title">Your Name</h2><img src="//image.tmdb.org/t/p/w185/yn.jpg" alt="Your Name"><span class="vote">TMDB 8.4</span><a class="lnk-blk" href="{BASE_URL}/movies/your-name/"></a></article>
    </div>
  </section>
</body></html>
"""

EMBED_HTML = """
<html><body>
  <div class="Video"><iframe src="https://stream.test/v/abc" width="640" height="360" allowfullscreen frameborder="0"></iframe></div>
  <iframe data-src="https://ads.test/frame"></iframe>
</body></html>
"""


class FakeSite:
    """Routes requests of a mocked httpx client to the fixtures above."""

    def __init__(self, base_url=BASE_URL, proxy_url=None):
        self.base_url = base_url
        self.proxy_url = proxy_url
        self.requests = []

    def paths(self):
        return [request.url.path for request in self.requests if request.url.host == "toon.test"]

    def page(self, path):
        if path == "/home/" or path == "/home":
            return LISTING_HTML + SITE_CHROME_HTML
        if path.startswith("/series/attack-on-titan"):
            return SERIES_HTML
        match = re.match(r"^/episode/attack-on-titan-(\d+)x\d+/$", path)
        if match:
            return season_html(int(match.group(1)))
        if path.startswith("/movies/spirited-away"):
            return MOVIE_HTML
        if re.match(r"^/(series|movies)/(page/\d+/)?$", path):
            return LISTING_HTML
        if path.startswith("/category/") or path.startswith("/home/letter/"):
            return LISTING_HTML
        return None

    def __call__(self, request):
        self.requests.append(request)
        url = str(request.url)
        if url == BASE_URL_SOURCE:
            return httpx.Response(200, text=f"  {self.base_url}/\n")
        if url == PROXY_URL_SOURCE:
            if self.proxy_url is None:
                return httpx.Response(404, text="Not Found")
            return httpx.Response(200, text=self.proxy_url)
        if request.url.host == "player.test":
            return httpx.Response(200, text='<iframe src="//cdn.player.test/stream/1"></iframe>')
        if request.url.host == "stream.test":
            return httpx.Response(200, text=EMBED_HTML)
        if request.url.host == "broken.test":
            return httpx.Response(500, text="down")
        body = self.page(request.url.path)
        if body is None:
            return httpx.Response(404, text="<html><body>Not Found</body></html>")
        return httpx.Response(200, text=body)


@pytest.fixture
def site():
    return FakeSite()


@pytest.fixture
def api(site):
    cache = ConfigCache()

    async def override_http_client():
        async with httpx.AsyncClient(transport=httpx.MockTransport(site)) as client:
            yield client

    def override_config_resolver(client: httpx.AsyncClient = Depends(get_http_client)):
        return RemoteConfigResolver(
            client,
            cache,
            base_url_source=BASE_URL_SOURCE,
            proxy_url_source=PROXY_URL_SOURCE,
        )

    app.dependency_overrides[get_http_client] = override_http_client
    app.dependency_overrides[get_config_resolver] = override_config_resolver
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
