"""Properties file fetching and parsing.

Configuration files use the ``key=value`` properties format:

    # comment
    ! also a comment
    sonar.jdbc.dialect = h2
    sonar.runtimeVersion: 7.9
    orchestrator.configUrl   file:///etc/orchestrator.properties
    long.value = first \\
                 second

Supported URL forms are ``http://``, ``https://``, ``file:`` and plain
filesystem paths. Content is decoded as UTF-8.
"""

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_SEPARATORS = "=: \t\f"


def _logical_lines(text: str):
    """Yield logical lines, joining backslash continuations."""
    pending = ""
    for raw in text.splitlines():
        line = raw.lstrip(" \t\f")
        if not pending and (not line or line[0] in "#!"):
            continue
        # An odd number of trailing backslashes continues the line
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            pending += line[:-1]
            continue
        yield pending + line
        pending = ""
    if pending:
        yield pending


def _unescape(text: str) -> str:
    out = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch != "\\" or i + 1 >= len(text):
            out.append(ch)
            i += 1
            continue
        nxt = text[i + 1]
        if nxt == "u" and i + 6 <= len(text):
            try:
                out.append(chr(int(text[i + 2:i + 6], 16)))
                i += 6
                continue
            except ValueError as e:
                raise ValueError(f"Malformed \\uxxxx encoding: {text[i:i + 6]}") from e
        out.append(_ESCAPES.get(nxt, nxt))
        i += 2
    return "".join(out)


def _split_pair(line: str) -> tuple[str, str]:
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in _SEPARATORS:
            break
        i += 1
    key = line[:i]
    rest = line[i:].lstrip(" \t\f")
    # A single '=' or ':' may follow whitespace between key and value
    if rest[:1] in ("=", ":") and (i >= len(line) or line[i] in " \t\f"):
        rest = rest[1:].lstrip(" \t\f")
    elif line[i:i + 1] in ("=", ":"):
        rest = line[i + 1:].lstrip(" \t\f")
    return _unescape(key), _unescape(rest)


def parse_properties(text: str) -> dict[str, str]:
    """Parse properties-format text into a dict.

    Later duplicates of a key win, as in a file read top to bottom.

    Raises:
        ValueError: On malformed ``\\uxxxx`` escapes.
    """
    props: dict[str, str] = {}
    for line in _logical_lines(text):
        key, value = _split_pair(line)
        props[key] = value
    return props


def _is_remote(url: str) -> bool:
    return urlparse(url).scheme.lower() in ("http", "https")


def _local_path(url: str) -> Path:
    parsed = urlparse(url)
    if parsed.scheme.lower() == "file":
        return Path(url2pathname(unquote(parsed.path)))
    return Path(url).expanduser()


def fetch_text(
    url: str,
    client: Optional[httpx.Client] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> str:
    """Fetch the UTF-8 text at ``url``.

    Args:
        url: ``http(s)://`` URL, ``file:`` URL or filesystem path.
        client: HTTP client to use. A short-lived client is created if omitted.
        timeout: Request timeout when no client is given.

    Raises:
        httpx.HTTPError: Remote fetch failed or returned an error status.
        OSError: Local file could not be read.
    """
    if not _is_remote(url):
        path = _local_path(url)
        logger.debug(f"Reading configuration file {path}")
        return path.read_text(encoding="utf-8")

    logger.debug(f"Downloading configuration file {url}")
    if client is None:
        with httpx.Client(timeout=httpx.Timeout(timeout), follow_redirects=True) as own_client:
            response = own_client.get(url)
            response.raise_for_status()
            return response.content.decode("utf-8")
    response = client.get(url)
    response.raise_for_status()
    return response.content.decode("utf-8")


def load_properties(
    url: str,
    client: Optional[httpx.Client] = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> dict[str, str]:
    """Fetch and parse the properties file at ``url``."""
    return parse_properties(fetch_text(url, client=client, timeout=timeout))
