# viewer.py
"""Viewer state machine and link resolution.

The browser client in ``static/script.js`` follows the same rules; this
module drives the server-rendered ``/go`` page and pins the behaviour down
for tests.
"""
from dataclasses import dataclass, replace
from enum import Enum
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from rewriter import RewriteError

EMPTY_INPUT_MESSAGE = "Please enter a valid URL"


class Status(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class ViewState:
    status: Status = Status.IDLE
    url: str = ""
    title: str = ""
    content: str = ""
    error: str = ""
    generation: int = 0

    @property
    def loading(self):
        return self.status is Status.LOADING


@dataclass(frozen=True)
class Submit:
    url: str


@dataclass(frozen=True)
class FetchResolved:
    generation: int
    title: str
    content: str


@dataclass(frozen=True)
class FetchFailed:
    generation: int
    message: str


def transition(state: ViewState, event) -> ViewState:
    """Return the state after *event*.

    A new Submit always supersedes a pending one. Results carrying an older
    generation belong to a superseded request and are dropped.
    """
    if isinstance(event, Submit):
        url = (event.url or "").strip()
        if not url:
            return replace(state, status=Status.ERROR, error=EMPTY_INPUT_MESSAGE,
                           title="", content="")
        return ViewState(status=Status.LOADING, url=url, generation=state.generation + 1)

    if isinstance(event, (FetchResolved, FetchFailed)):
        if state.status is not Status.LOADING or event.generation != state.generation:
            return state
        if isinstance(event, FetchResolved):
            return replace(state, status=Status.SUCCESS, title=event.title,
                           content=event.content, error="")
        return replace(state, status=Status.ERROR, error=event.message,
                       title="", content="")

    raise TypeError(f"Unknown viewer event: {event!r}")


def run_submission(url, fetch, state=None) -> ViewState:
    """Drive one Submit through *fetch* to a settled state.

    *fetch* takes a URL and returns an object with ``title`` and ``content``;
    :class:`rewriter.RewriteError` subclasses become the error message.
    """
    state = transition(state or ViewState(), Submit(url))
    if not state.loading:
        return state
    try:
        result = fetch(state.url)
    except RewriteError as e:
        return transition(state, FetchFailed(state.generation, str(e)))
    return transition(state, FetchResolved(state.generation, result.title, result.content))


def proxy_links(content, link_for):
    """Point every link in *content* back through the proxy.

    Used for the frame on the server-rendered page, where no script is
    around to intercept clicks. ``target`` and ``rel`` are dropped from all
    anchors; followable hrefs become ``link_for(href)`` and load in the
    parent page. Fragment and ``javascript:`` hrefs keep their value.
    """
    soup = BeautifulSoup(content, "lxml", multi_valued_attributes=None)
    for a in soup.find_all("a"):
        del a["target"]
        del a["rel"]
        href = a.get("href")
        if not is_followable(href):
            continue
        a["href"] = link_for(href)
        a["target"] = "_parent"
    return str(soup)


def is_followable(href):
    href = (href or "").strip()
    return bool(href) and not href.startswith("#") and not href.lower().startswith("javascript:")


def resolve_link(href, current_url):
    """Absolute URL a click on *href* should load, or None to stay put."""
    if not is_followable(href):
        return None
    href = href.strip()

    if href.startswith("//"):
        return f"{urlparse(current_url).scheme or 'https'}:{href}"
    if urlparse(href).scheme:
        return href
    if href.startswith("/"):
        current = urlparse(current_url)
        return f"{current.scheme}://{current.netloc}{href}"
    return urljoin(current_url, href)
