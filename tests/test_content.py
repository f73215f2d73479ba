import json
import logging

from shop_audit.models import ContentRequest
from shop_audit.remediation.content import (
    CONTENT_SCHEMA,
    apply_content,
    description_text,
)
from shop_audit.shopify import StoreAPIError

from fakes import CONTENT_JSON, META, FakeGenerator, FakeStore, failing_generator


def make_request(**overrides) -> ContentRequest:
    defaults = dict(
        product_id="gid://shopify/Product/1234567890123",
        product_name="The Ultimate Ergonomic Office Chair",
        product_description="<p>A comfortable and <b>adjustable</b> chair.</p>",
        product_tags="office, ergonomic, chair",
        tone="Luxury",
        target_language="German",
    )
    defaults.update(overrides)
    return ContentRequest(**defaults)


def test_rewrites_and_updates_product():
    store = FakeStore()

    result = apply_content(make_request(), generator=FakeGenerator(CONTENT_JSON), store=store)

    assert result.success
    assert result.product_name == "ErgoPro Office Chair"
    assert result.new_meta_description == META
    assert "Luxury tone" in result.message
    assert store.updates == [{
        "id": "gid://shopify/Product/1234567890123",
        "title": "ErgoPro Office Chair",
        "description_html": "<p>Work longer in comfort.</p>",
        "seo_title": "ErgoPro Office Chair",
        "seo_description": META,
    }]


def test_missing_product_id_makes_no_remote_calls():
    store = FakeStore()
    generator = FakeGenerator(CONTENT_JSON)

    result = apply_content(make_request(product_id=None), generator=generator, store=store)

    assert not result.success
    assert result.errors == ["No product ID provided. Please select a product."]
    assert store.calls == []
    assert generator.calls == []


def test_store_user_error_fails_the_whole_request():
    store = FakeStore(update_errors=["Title can't be blank"])

    result = apply_content(make_request(), generator=FakeGenerator(CONTENT_JSON), store=store)

    assert not result.success
    assert result.errors == ["Shopify Product Update failed: Title can't be blank"]
    assert result.product_name is None
    assert store.calls == ["update_product"]


def test_store_transport_error_is_reported():
    store = FakeStore(fail_on={"update_product": StoreAPIError("Shopify API error 502: bad gateway")})

    result = apply_content(make_request(), generator=FakeGenerator(CONTENT_JSON), store=store)

    assert not result.success
    assert "502" in result.errors[0]


def test_generation_failure_skips_update():
    store = FakeStore()

    result = apply_content(make_request(), generator=failing_generator(), store=store)

    assert not result.success
    assert "500" in result.errors[0]
    assert store.calls == []


def test_missing_field_in_generated_json_skips_update():
    store = FakeStore()
    payload = json.loads(CONTENT_JSON)
    del payload["newTitle"]

    result = apply_content(make_request(), generator=FakeGenerator(json.dumps(payload)), store=store)

    assert not result.success
    assert "newTitle" in result.errors[0]
    assert store.calls == []


def test_prompt_includes_tone_language_and_plain_description():
    generator = FakeGenerator(CONTENT_JSON)

    apply_content(make_request(), generator=generator, store=FakeStore())

    system_prompt, user_query, schema = generator.calls[0]
    assert "Luxury & Exclusive" in system_prompt
    assert "German" in system_prompt
    assert "A comfortable and adjustable chair." in user_query
    assert "<b>" not in user_query
    assert schema is CONTENT_SCHEMA


def test_short_meta_description_is_applied_with_warning(caplog):
    payload = json.loads(CONTENT_JSON)
    payload["newMetaDescription"] = "Too short."
    store = FakeStore()

    with caplog.at_level(logging.WARNING, logger="shop_audit.remediation.content"):
        result = apply_content(make_request(), generator=FakeGenerator(json.dumps(payload)), store=store)

    assert result.success
    assert store.updates[0]["seo_description"] == "Too short."
    assert "meta description is 10 chars" in caplog.text


def test_placeholder_content_is_not_applied_by_default():
    store = FakeStore()

    result = apply_content(
        make_request(), generator=FakeGenerator(CONTENT_JSON, degraded=True), store=store
    )

    assert not result.success
    assert result.degraded
    assert store.calls == []


def test_description_text_strips_markup():
    assert description_text("<ul><li>Mesh</li><li>Lumbar</li></ul>") == "Mesh Lumbar"
    assert description_text(None) == ""
