import pytest

from mcproducts.trans import (
    KeyNotFoundError,
    MissingParamsError,
    NotInitializedError,
    RenderError,
    TemplatePool,
    TranslationElement,
    TranslationElements,
    parse_translations_response,
    tr,
    translations_init,
    translations_reset,
)


@pytest.fixture(autouse=True)
def clean_store():
    translations_reset()
    yield
    translations_reset()


def _sample():
    return {
        "en": TranslationElements(
            [
                TranslationElement("plain", "Just text"),
                TranslationElement("greet", "Hello {{ name }}"),
                TranslationElement("broken", "{% if %}{{ x }}"),
            ]
        ),
        "fr": TranslationElements([TranslationElement("plain", "Texte")]),
    }


def test_tr_before_init_raises():
    with pytest.raises(NotInitializedError):
        tr("en", "plain", None)


def test_plain_translation_returns_template_text():
    translations_init(_sample(), 5)
    assert tr("en", "plain", None) == "Just text"
    assert tr("fr", "plain", None) == "Texte"


def test_translation_with_params_renders():
    translations_init(_sample(), 5)
    assert tr("en", "greet", {"name": "Ann"}) == "Hello Ann"
    assert tr("en", "greet", {"name": "Bob"}) == "Hello Bob"


def test_missing_params_raise():
    translations_init(_sample(), 5)
    with pytest.raises(MissingParamsError):
        tr("en", "greet", None)


def test_missing_variable_in_params_raises_render_error():
    translations_init(_sample(), 5)
    with pytest.raises(RenderError) as info:
        tr("en", "greet", {"other": "x"})
    assert str(info.value).startswith("template render error: ")


def test_syntax_error_raises_render_error():
    translations_init(_sample(), 5)
    with pytest.raises(RenderError):
        tr("en", "broken", {"x": "1"})


@pytest.mark.parametrize("lang,key", [("en", "nope"), ("de", "plain")])
def test_unknown_key_or_language(lang, key):
    translations_init(_sample(), 5)
    with pytest.raises(KeyNotFoundError) as info:
        tr(lang, key, None)
    assert info.value.key == key
    assert str(info.value) == f"translation key is not found: {key}"


def test_second_init_fails():
    translations_init(_sample(), 5)
    with pytest.raises(NotInitializedError):
        translations_init(_sample(), 5)


def test_parse_translations_response():
    parsed = parse_translations_response(_sample())
    assert parsed["fr"] == {"plain": "Texte"}
    assert parsed["en"]["greet"] == "Hello {{ name }}"


def test_pool_has_vars_detection():
    assert TemplatePool("Hi {{ a }}", 2).has_vars is True
    assert TemplatePool("Hi {{ a", 2).has_vars is False


def test_pool_bounded_and_reuses_instances():
    pool = TemplatePool("hi", 1)
    first = pool.get()
    second = pool.get()
    pool.return_instance(first)
    pool.return_instance(second)
    assert len(pool.available) == 1
    assert pool.get() is first