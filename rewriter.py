# rewriter.py
"""Fetch a remote page and swap "Yale" for "Fale" in its visible text.

Only text nodes and the document title change. Attribute values, tag
names and attribute names come out of :func:`rewrite_document` exactly as
they went in.
"""
from dataclasses import dataclass
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString

import settings
from logs import get_logger

log = get_logger(__name__)

# applied in order; the casings are disjoint so the passes never overlap
REPLACEMENTS = (("Yale", "Fale"), ("yale", "fale"))


class RewriteError(Exception):
    """Base class for errors surfaced to callers of :func:`rewrite`."""


class ValidationError(RewriteError):
    """The caller supplied a missing or malformed URL."""


class FetchError(RewriteError):
    """The remote page could not be fetched."""


@dataclass(frozen=True)
class RewriteResult:
    content: str
    title: str
    original_url: str

    def to_dict(self):
        return {
            "success": True,
            "content": self.content,
            "title": self.title,
            "originalUrl": self.original_url,
        }


def replace_token(text: str) -> str:
    for old, new in REPLACEMENTS:
        text = text.replace(old, new)
    return text


def validate_url(url) -> str:
    if not isinstance(url, str) or not url.strip():
        raise ValidationError("URL is required")
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValidationError(f"Invalid URL: {url}")
    return url


def _is_text_node(node) -> bool:
    # comments, CDATA, doctypes and declarations are all PreformattedString
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


def rewrite_text_nodes(root) -> int:
    """Rewrite the text children of every element below *root*.

    *root*'s own direct text children are left alone. Returns the number of
    nodes that changed.
    """
    changed = 0
    for element in root.find_all(True):
        for child in list(element.children):
            if not _is_text_node(child):
                continue
            text = str(child)
            new_text = replace_token(text)
            if new_text != text:
                child.replace_with(new_text)
                changed += 1
    return changed


def rewrite_title(soup) -> str:
    titles = soup.find_all("title")
    title = replace_token("".join(t.get_text() for t in titles))
    for tag in titles:
        tag.string = title
    return title


def rewrite_document(markup):
    """Parse *markup*, rewrite it and return ``(content, title)``."""
    # keep class/rel values verbatim instead of splitting them into lists
    soup = BeautifulSoup(markup, "lxml", multi_valued_attributes=None)
    if soup.body is not None:
        changed = rewrite_text_nodes(soup.body)
        log.debug("Rewrote %d text nodes", changed)
    title = rewrite_title(soup)
    return str(soup), title


def fetch_remote(url, timeout=None, user_agent=None):
    headers = {"User-Agent": user_agent or settings.USER_AGENT}
    try:
        r = requests.get(url, headers=headers, timeout=timeout or settings.FETCH_TIMEOUT)
        r.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(str(e)) from e

    # without a declared charset let the parser sniff the encoding from <meta>
    content_type = r.headers.get("Content-Type", "")
    if "charset" in content_type.lower():
        return r.text
    return r.content


def rewrite(url, timeout=None, user_agent=None) -> RewriteResult:
    """Fetch *url* and return its rewritten markup and title.

    Raises :class:`ValidationError` before any network traffic when *url* is
    missing or not an absolute http(s) URL, and :class:`FetchError` when the
    request fails, times out or answers with a non-2xx status.
    """
    url = validate_url(url)
    log.info("Fetching %s", url)
    markup = fetch_remote(url, timeout=timeout, user_agent=user_agent)
    content, title = rewrite_document(markup)
    return RewriteResult(content=content, title=title, original_url=url)
