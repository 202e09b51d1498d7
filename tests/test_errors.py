import pytest

from mcproducts.context import Context
from mcproducts.errors import (
    MAX_ERROR_LENGTH,
    NO_TRANSLATION,
    AppError,
    AppErrorMessage,
    InternalError,
    app_error_from_proto_app_error,
    convert_proto_params,
)
from mcproducts.trans import TranslationElement, TranslationElements, translations_init, translations_reset


@pytest.fixture(autouse=True)
def clean_store():
    translations_reset()
    yield
    translations_reset()


def test_internal_error_display_and_cause():
    cause = OSError("boom")
    err = InternalError(msg="failed", path="products.x", err=cause)
    assert str(err) == f"InternalError: false {cause} failed products.x"
    assert err.__cause__ is cause
    assert err.temp is False


def test_error_string_joins_parts():
    err = AppError(where="w", message="msg", detailed_error="details", wrapped=ValueError("inner"))
    assert err.error_string() == "w: msg, details, inner"
    assert str(err) == err.error_string()


def test_untranslated_message_is_omitted():
    err = AppError(message=NO_TRANSLATION, detailed_error="details")
    assert err.error_string() == "details"


def test_error_string_is_truncated():
    err = AppError(detailed_error="x" * 2000)
    text = err.error_string()
    assert len(text) == MAX_ERROR_LENGTH + 3
    assert text.endswith("...")


def test_create_without_context_uses_id():
    err = AppError.create(None, "where", "app.some.error", {}, "d", 400, None)
    assert err.message == "app.some.error"
    assert err.status_code == 400
    assert err.tr_params is None


def test_create_translates_with_context():
    translations_init(
        {
            "en": TranslationElements(
                [
                    TranslationElement("app.err", "Something failed"),
                    TranslationElement("app.item", "Failed {{ item }}"),
                ]
            )
        },
        5,
    )
    ctx = Context(accept_language="en")
    assert AppError.create(ctx, "w", "app.err", {}, "", None, None).message == "Something failed"
    err = AppError.create(ctx, "w", "app.item", {"item": "cart"}, "", None, None)
    assert err.message == "Failed cart"


def test_create_falls_back_when_translation_missing():
    ctx = Context(accept_language="en")
    err = AppError.create(ctx, "w", "app.unknown", {}, "", None, None)
    assert err.message == "app.unknown"


def test_translate_respects_skip():
    err = AppError(id="x", message="kept", skip_translation=True, ctx=Context())
    err.translate(lambda lang, key, params: "new")
    assert err.message == "kept"


def test_translate_uses_function_with_language():
    err = AppError(id="x", ctx=Context(accept_language="fr"))
    err.translate(lambda lang, key, params: f"{lang}:{key}")
    assert err.message == "fr:x"


def test_wrap_unwrap_and_wipe():
    inner = RuntimeError("inner")
    err = AppError(detailed_error="d").wrap(inner)
    assert err.unwrap() is inner
    assert err.__cause__ is inner
    err.wipe_detailed()
    assert err.unwrap() is None
    assert err.detailed_error == ""


def test_message_round_trip():
    err = AppError(
        id="e",
        message="m",
        detailed_error="d",
        request_id="r",
        status_code=404,
        params={"a": "b"},
        nested_params={"n": {"c": "d"}},
        where="w",
        skip_translation=True,
    )
    back = app_error_from_proto_app_error(err.to_message())
    assert back.to_message() == err.to_message()
    assert back.params == {"a": "b"}
    assert back.nested_params == {"n": {"c": "d"}}


def test_empty_request_id_becomes_none():
    err = app_error_from_proto_app_error(AppErrorMessage(id="e"))
    assert err.request_id is None
    assert err.status_code == 0
    assert err.to_message().request_id == ""


def test_convert_proto_params_handles_missing_maps():
    assert convert_proto_params(AppErrorMessage()) == ({}, {})