"""Translation store backed by pooled templates."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import jinja2

_ENV = jinja2.Environment(
    undefined=jinja2.StrictUndefined,
    autoescape=False,
    keep_trailing_newline=True,
)


class TranslationError(Exception):
    """Base class for translation failures."""


class NotInitializedError(TranslationError):
    def __init__(self) -> None:
        super().__init__("translation store is not initialized")


class MissingParamsError(TranslationError):
    def __init__(self) -> None:
        super().__init__("translation is missing params")


class KeyNotFoundError(TranslationError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"translation key is not found: {key}")


class RenderError(TranslationError):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"template render error: {reason}")


@dataclass(frozen=True)
class TranslationElement:
    id: str
    tr: str


@dataclass
class TranslationElements:
    trans: list[TranslationElement] = field(default_factory=list)


class TemplatePool:
    """A bounded pool of compiled instances of one template."""

    def __init__(self, template: str, max_size: int) -> None:
        self.template_str = template
        self.has_vars = "{{" in template and "}}" in template
        self.max_size = max_size
        self.available: deque[jinja2.Template] = deque()
        self.lock = threading.Lock()

    def get(self) -> jinja2.Template:
        """Take a pooled instance, compiling a new one when the pool is empty."""
        if self.available:
            return self.available.popleft()
        try:
            return _ENV.from_string(self.template_str)
        except jinja2.TemplateError as exc:
            raise RenderError(str(exc)) from exc

    def return_instance(self, instance: jinja2.Template) -> None:
        """Give an instance back; it is dropped if the pool is full."""
        if len(self.available) < self.max_size:
            self.available.append(instance)


_store: dict[str, dict[str, TemplatePool]] | None = None
_store_lock = threading.Lock()


def parse_translations_response(data: Mapping[str, Any]) -> dict[str, dict[str, str]]:
    """Flatten per-language translation elements into ``{lang: {id: text}}``."""
    return {lang: {el.id: el.tr for el in elements.trans} for lang, elements in data.items()}


def translations_init(trans: Mapping[str, Any], max_pool_size: int) -> None:
    """Fill the translation store once; a second call raises ``NotInitializedError``."""
    global _store
    store = {
        lang: {key: TemplatePool(text, max_pool_size) for key, text in entries.items()}
        for lang, entries in parse_translations_response(trans).items()
    }
    with _store_lock:
        if _store is not None:
            raise NotInitializedError()
        _store = store


def translations_reset() -> None:
    """Empty the translation store so it can be initialised again."""
    global _store
    with _store_lock:
        _store = None


def tr(lang: str, id: str, params: Mapping[str, Any] | None = None) -> str:
    """Translate ``id`` into ``lang``, rendering ``params`` into the template."""
    store = _store
    if store is None:
        raise NotInitializedError()
    pool = store.get(lang, {}).get(id)
    if pool is None:
        raise KeyNotFoundError(id)

    with pool.lock:
        if pool.has_vars and params is None:
            raise MissingParamsError()
        template = pool.get()
        if params is None:
            result = pool.template_str
        else:
            if not isinstance(params, Mapping):
                raise RenderError("params must be a mapping")
            try:
                result = template.render(dict(params))
            except jinja2.TemplateError as exc:
                raise RenderError(str(exc)) from exc
        pool.return_instance(template)
    return result