"""Tests for markup, stylesheet, schema and locale scanners."""

from themeplane.extraction.markup import (
    collect_locale_keys,
    extract_css_classes,
    extract_data_attributes,
    extract_liquid_classes,
    extract_settings_references,
    extract_translation_keys,
    iter_settings_accesses,
    parse_json,
    schema_setting_ids,
    split_schema_block,
)

SECTION = """<div class="hero {{ section.settings.style }}">
  <h1>{{ section.settings.heading }}</h1>
  {% for block in section.blocks %}{{ block.settings.label }}{% endfor %}
</div>
{% schema %}
{
  "name": "Hero",
  "settings": [{"id": "heading", "type": "text"}, {"id": "style", "type": "select"}],
  "blocks": [{"type": "item", "settings": [{"id": "label", "type": "text"}]}]
}
{% endschema %}
"""


class TestLiquidClasses:
    """Literal class tokens in markup."""

    def test_splits_tokens(self) -> None:
        assert extract_liquid_classes('<a class="btn btn--primary">') == {"btn", "btn--primary"}

    def test_single_quotes(self) -> None:
        assert extract_liquid_classes("<a class='badge'>") == {"badge"}

    def test_liquid_expressions_dropped(self) -> None:
        """Dynamic parts are ignored, literal neighbours are kept."""
        assert extract_liquid_classes(SECTION) == {"hero"}

    def test_data_class_attribute_not_a_class(self) -> None:
        assert extract_liquid_classes('<div data-class="x">') == set()


class TestCssClasses:
    """Class selectors in stylesheets."""

    def test_selectors(self) -> None:
        css = ".card { }\n.card__title:hover{}\n.a, .b > .c {}\n.btn.is-active{}"
        assert extract_css_classes(css) == {"card", "card__title", "a", "b", "c", "btn", "is-active"}

    def test_decimal_values_not_selectors(self) -> None:
        assert extract_css_classes(".x { margin: 0.5rem 1.25em; }") == {"x"}


class TestDataAttributes:
    def test_attributes(self) -> None:
        html = '<button data-cart-add data-product-id="{{ product.id }}">'
        assert extract_data_attributes(html) == {"data-cart-add", "data-product-id"}


class TestSettings:
    """Schema block parsing and settings accesses."""

    def test_accesses_with_scope(self) -> None:
        accesses = iter_settings_accesses(SECTION)
        assert ("section", "heading") in accesses
        assert ("block", "label") in accesses

    def test_references_are_ids(self) -> None:
        assert extract_settings_references(SECTION) == {"style", "heading", "label"}

    def test_split_schema_block(self) -> None:
        schema, markup, present = split_schema_block(SECTION)
        assert present is True
        assert schema["name"] == "Hero"
        assert "{% schema %}" not in markup
        assert "section.settings.heading" in markup

    def test_invalid_schema_json(self) -> None:
        schema, _markup, present = split_schema_block("{% schema %}{ nope {% endschema %}")
        assert present is True
        assert schema is None

    def test_no_schema_block(self) -> None:
        schema, markup, present = split_schema_block("<p>hi</p>")
        assert (schema, markup, present) == (None, "<p>hi</p>", False)

    def test_setting_ids_include_blocks(self) -> None:
        schema, _markup, _present = split_schema_block(SECTION)
        assert schema_setting_ids(schema) == {"heading", "style", "label"}

    def test_setting_ids_tolerate_bad_shapes(self) -> None:
        assert schema_setting_ids(None) == set()
        assert schema_setting_ids({"settings": "x", "blocks": [1, {"settings": [{"id": 3}]}]}) == set()


class TestLocales:
    """Locale flattening and translation keys."""

    def test_collect_nested_keys(self) -> None:
        contents = [
            '{"general": {"cart": "Cart", "search": {"title": "Search"}}}',
            '{"products": {"add": "Add"}}',
            "not json",
        ]
        assert collect_locale_keys(contents) == {
            "general.cart",
            "general.search.title",
            "products.add",
        }

    def test_translation_keys(self) -> None:
        content = "{{ 'general.cart' | t }} {{ \"products.add\" | t: count: 1 }} {{ 'x' | upcase }}"
        assert extract_translation_keys(content) == ["general.cart", "products.add"]


class TestParseJson:
    def test_comment_header_stripped(self) -> None:
        assert parse_json("/* generated */ {\"a\": 1}") == {"a": 1}

    def test_invalid_returns_none(self) -> None:
        assert parse_json("{") is None
