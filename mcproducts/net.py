"""Validation of service URL targets."""

from __future__ import annotations

import re
from urllib.parse import SplitResult, urlsplit

_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*\Z")
_FORBIDDEN = frozenset('<>\\^`|')
_AUTHORITY_END = "/?#"


def _invalid(reason: str) -> ValueError:
    return ValueError(f"invalid URL: {reason}")


def _check_port(port: str | None) -> None:
    if not port:
        return
    if not port.isdigit() or int(port) > 65535:
        raise _invalid("invalid port")


def _check_authority(authority: str) -> None:
    if not authority:
        raise _invalid("invalid format")
    hostport = authority.rpartition("@")[2]
    if hostport.startswith("["):
        end = hostport.find("]")
        if end == -1:
            raise _invalid("invalid authority")
        rest = hostport[end + 1:]
        if rest and not rest.startswith(":"):
            raise _invalid("invalid authority")
        _check_port(rest[1:] if rest else None)
        return
    if "[" in hostport or "]" in hostport or hostport.count(":") > 1:
        raise _invalid("invalid authority")
    _, sep, port = hostport.partition(":")
    _check_port(port if sep else None)


def validate_url_target(url: str) -> SplitResult:
    """Parse ``url`` as a URI target, raising ``ValueError`` when it is malformed.

    Accepts absolute URIs (``scheme://authority/path``), origin form (``/path``),
    the asterisk form and bare authorities such as ``host:port``.
    """
    if not url:
        raise _invalid("empty string")
    if any(ord(ch) <= 0x20 or ord(ch) >= 0x7F or ch in _FORBIDDEN for ch in url):
        raise _invalid("invalid uri character")
    if url == "*" or url.startswith("/"):
        return urlsplit(url)

    scheme, sep, rest = url.partition("://")
    if sep:
        if not _SCHEME.match(scheme):
            raise _invalid("invalid scheme")
        end = next((pos for pos, ch in enumerate(rest) if ch in _AUTHORITY_END), len(rest))
        _check_authority(rest[:end])
        return urlsplit(url)

    if any(ch in _AUTHORITY_END for ch in url):
        raise _invalid("invalid format")
    _check_authority(url)
    return SplitResult("", url, "", "", "")