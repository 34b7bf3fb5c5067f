# File: webcrawler/utils.py
"""webcrawler.utils: Утилитарные функции для нормализации URL и выделения домена."""

from __future__ import annotations

import posixpath
import re
import string
from typing import Collection, List, Sequence
from urllib.parse import quote, urlsplit, urlunsplit

from webcrawler.errors import InvalidURL
from webcrawler.logger import logger

__all__: Sequence[str] = (
    "normalize_url",
    "is_valid_url",
    "extract_domain",
    "remove_duplicates",
)

_SCHEMES = ("http", "https")
_DEFAULT_PORTS = {"http": 80, "https": 443}
_PATH_SAFE = "/:@!$&'()*+,;=~"
_QUERY_SAFE = "/?:@!$'()*+,;=~"
_UNRESERVED = frozenset(string.ascii_letters + string.digits + "-._~")
_ESCAPE_RE = re.compile(r"%([0-9A-Fa-f]{2})")
_LONE_PERCENT_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def _normalize_escapes(part: str) -> str:
    """Приводит %XX к верхнему регистру и раскрывает только незарезервированные символы."""
    part = _LONE_PERCENT_RE.sub("%25", part)

    def repl(match: re.Match) -> str:
        char = chr(int(match.group(1), 16))
        return char if char in _UNRESERVED else "%" + match.group(1).upper()

    return _ESCAPE_RE.sub(repl, part)


def normalize_url(url: str) -> str:
    """
    Приводит URL к каноническому виду.

    Схема и хост в нижнем регистре, порт по умолчанию удаляется, фрагмент
    отбрасывается, ``.``/``..`` в пути схлопываются, пустой путь становится
    ``/``, параметры запроса сортируются без раскодирования. Уже
    закодированные %XX сохраняются как есть (кроме незарезервированных). Для не-http(s) адресов и адресов без
    хоста бросает :class:`InvalidURL`.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidURL(str(url), "empty URL")
    try:
        parsed = urlsplit(url.strip())
        port = parsed.port
    except ValueError as exc:
        raise InvalidURL(url, str(exc)) from exc

    scheme = parsed.scheme.lower()
    if scheme not in _SCHEMES:
        raise InvalidURL(url, "unsupported scheme")
    host = (parsed.hostname or "").rstrip(".")
    if not host:
        raise InvalidURL(url, "missing host")

    netloc = f"[{host}]" if ":" in host else host
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{netloc}:{port}"
    if parsed.username:
        userinfo = parsed.username if parsed.password is None else f"{parsed.username}:{parsed.password}"
        netloc = f"{userinfo}@{netloc}"

    path = _normalize_escapes(quote(parsed.path or "/", safe=_PATH_SAFE + "%"))
    trailing = path.endswith("/")
    path = posixpath.normpath(path)
    if trailing and not path.endswith("/"):
        path += "/"
    if not path.startswith("/"):
        path = "/" + path
    if path.startswith("//"):
        path = "/" + path.lstrip("/")

    pairs = [_normalize_escapes(quote(p, safe=_QUERY_SAFE + "%")) for p in parsed.query.split("&") if p]
    pairs.sort(key=lambda pair: pair.partition("=")[::2])
    query = "&".join(pairs)

    return urlunsplit((scheme, netloc, path, query, ""))


def is_valid_url(url: str) -> bool:
    """Проверяет, что URL нормализуется (http(s) и есть хост)."""
    try:
        normalize_url(url)
    except InvalidURL:
        return False
    return True


def extract_domain(url: str) -> str:
    """Возвращает хост из URL (нижний регистр, без порта); ключ для троттлинга."""
    try:
        host = urlsplit(url).hostname
    except ValueError as exc:
        raise InvalidURL(url, str(exc)) from exc
    if not host:
        raise InvalidURL(url, "missing host")
    return host.rstrip(".")


def remove_duplicates(urls: Collection[str]) -> List[str]:
    """Удаляет дубликаты из списка URL, сохраняя порядок."""
    unique = list(dict.fromkeys(urls))
    removed = len(urls) - len(unique)
    if removed:
        logger.debug("Removed %d duplicate URLs", removed)
    return unique
