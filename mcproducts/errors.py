"""Internal and application error types."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from .context import Context
from .trans import tr

MAX_ERROR_LENGTH = 1024
NO_TRANSLATION = "<untranslated>"

TranslateFunc = Callable[[str, str, Mapping[str, Any]], str]


class InternalError(Exception):
    """A failure inside the service, tagged with where it happened."""

    def __init__(self, msg: str, path: str, err: Any, temp: bool = False) -> None:
        super().__init__(msg)
        self.temp = temp
        self.err = err
        self.msg = msg
        self.path = path
        if isinstance(err, BaseException):
            self.__cause__ = err

    def __str__(self) -> str:
        return f"InternalError: {str(self.temp).lower()} {self.err} {self.msg} {self.path}"


@dataclass
class AppErrorMessage:
    """Wire form of an application error."""

    id: str = ""
    message: str = ""
    detailed_error: str = ""
    status_code: int = 0
    where: str = ""
    skip_translation: bool = False
    params: dict[str, str] | None = None
    nested_params: dict[str, dict[str, str]] | None = None
    request_id: str = ""


def _translate_with_store(lang: str, id: str, params: Mapping[str, Any]) -> str:
    return tr(lang, id, dict(params) if params else None)


class AppError(Exception):
    """A user-facing error with a translatable message."""

    def __init__(
        self,
        *,
        ctx: Context | None = None,
        id: str = "",
        message: str = "",
        detailed_error: str = "",
        request_id: str | None = None,
        status_code: int | None = None,
        tr_params: Mapping[str, Any] | None = None,
        params: Mapping[str, str] | None = None,
        nested_params: Mapping[str, Mapping[str, str]] | None = None,
        where: str = "",
        skip_translation: bool = False,
        wrapped: BaseException | None = None,
    ) -> None:
        super().__init__()
        self.ctx = ctx
        self.id = id
        self.message = message
        self.detailed_error = detailed_error
        self.request_id = request_id
        self.status_code = status_code
        self.tr_params = dict(tr_params) if tr_params is not None else None
        self.params = dict(params or {})
        self.nested_params = {k: dict(v) for k, v in (nested_params or {}).items()}
        self.where = where
        self.skip_translation = skip_translation
        self.wrapped = wrapped
        self.__cause__ = wrapped

    @classmethod
    def create(
        cls,
        ctx: Context | None,
        where: str,
        id: str,
        tr_params: Mapping[str, Any] | None,
        details: str,
        status_code: int | None = None,
        wrapped: BaseException | None = None,
    ) -> "AppError":
        """Build an error and translate its message from the translation store."""
        err = cls(
            ctx=ctx,
            id=id,
            detailed_error=details,
            status_code=status_code,
            tr_params=dict(tr_params) if tr_params else None,
            where=where,
            wrapped=wrapped,
        )
        err.translate(_translate_with_store)
        return err

    def error_string(self) -> str:
        parts = []
        if self.where:
            parts.append(f"{self.where}: ")
        if self.message != NO_TRANSLATION:
            parts.append(self.message)
        if self.detailed_error:
            if self.message != NO_TRANSLATION:
                parts.append(", ")
            parts.append(self.detailed_error)
        if self.wrapped is not None:
            parts.append(f", {self.wrapped}")
        text = "".join(parts)
        if len(text) > MAX_ERROR_LENGTH:
            text = text[:MAX_ERROR_LENGTH] + "..."
        return text

    def __str__(self) -> str:
        return self.error_string()

    def translate(self, tf: TranslateFunc | None) -> None:
        """Set the message from ``tf``, falling back to the error id."""
        if self.skip_translation:
            return
        if tf is not None and self.ctx is not None:
            try:
                self.message = tf(self.ctx.accept_language, self.id, self.tr_params or {})
                return
            except Exception:
                pass
        self.message = self.id

    def unwrap(self) -> BaseException | None:
        return self.wrapped

    def wrap(self, err: BaseException) -> "AppError":
        self.wrapped = err
        self.__cause__ = err
        return self

    def wipe_detailed(self) -> None:
        self.wrapped = None
        self.__cause__ = None
        self.detailed_error = ""

    def to_message(self) -> AppErrorMessage:
        return AppErrorMessage(
            id=self.id,
            message=self.message,
            detailed_error=self.detailed_error,
            status_code=self.status_code or 0,
            where=self.where,
            skip_translation=self.skip_translation,
            params=dict(self.params),
            nested_params={k: dict(v) for k, v in self.nested_params.items()},
            request_id=self.request_id or "",
        )


def convert_proto_params(ae: AppErrorMessage) -> tuple[dict[str, str], dict[str, dict[str, str]]]:
    """Copy the flat and nested parameter maps out of a wire error."""
    shallow = dict(ae.params or {})
    nested = {k: dict(v) for k, v in (ae.nested_params or {}).items()}
    return shallow, nested


def app_error_from_proto_app_error(ae: AppErrorMessage) -> AppError:
    """Rebuild an ``AppError`` from its wire form."""
    params, nested = convert_proto_params(ae)
    return AppError(
        id=ae.id,
        message=ae.message,
        detailed_error=ae.detailed_error,
        request_id=ae.request_id or None,
        status_code=ae.status_code,
        params=params,
        nested_params=nested,
        where=ae.where,
        skip_translation=ae.skip_translation,
    )