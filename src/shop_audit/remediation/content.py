"""Content Rewrite pipeline: regenerate product copy with Gemini and update the product."""

import logging

from bs4 import BeautifulSoup

from ..gemini import GeminiClient, GenerationError
from ..models import ContentRequest, ProductContent, RemediationResult
from ..schema import SchemaError, obj, parse_structured, string
from ..shopify import ShopifyAdmin, StoreAPIError
from .apply import Mutation, MutationError, apply_mutations
from .policies import DEGRADED_MESSAGE
from .prompts import content_system_prompt, content_user_query


LOGGER = logging.getLogger(__name__)

CONTENT_SCHEMA = obj(
    {
        "newDescription": string(
            "The new, SEO-optimized product description, formatted with HTML."
        ),
        "newMetaDescription": string(
            "A concise, SEO-friendly meta description (120-155 characters)."
        ),
        "newTitle": string("A slightly optimized, catchy product title."),
    },
    description="Generated SEO content fields.",
)

META_DESCRIPTION_MIN = 120
META_DESCRIPTION_MAX = 155

PRODUCT_UPDATE_LABEL = "Shopify Product Update"


def validate_content_request(request: ContentRequest) -> list[str]:
    if not (request.product_id or "").strip():
        return ["No product ID provided. Please select a product."]
    return []


def description_text(html: str | None) -> str:
    """Reduce an HTML product description to plain text for the prompt."""
    if not html:
        return ""
    return BeautifulSoup(html, "lxml").get_text(" ", strip=True)


def parse_product_content(text: str) -> ProductContent:
    payload = parse_structured(text, CONTENT_SCHEMA)
    content = ProductContent(
        new_title=payload["newTitle"],
        new_description=payload["newDescription"],
        new_meta_description=payload["newMetaDescription"],
    )

    length = len(content.new_meta_description)
    if not META_DESCRIPTION_MIN <= length <= META_DESCRIPTION_MAX:
        LOGGER.warning(
            "Generated meta description is %d chars (expected %d-%d)",
            length, META_DESCRIPTION_MIN, META_DESCRIPTION_MAX,
        )
    return content


def apply_content(
    request: ContentRequest,
    *,
    generator: GeminiClient,
    store: ShopifyAdmin,
    allow_placeholder: bool = False,
) -> RemediationResult:
    """Rewrite a product's title, description and meta description, then save it.

    The product update is all-or-nothing: any store-side error fails the request.
    """
    problems = validate_content_request(request)
    if problems:
        return RemediationResult.failure(*problems)

    try:
        generation = generator.generate(
            content_system_prompt(request),
            content_user_query(request, description_text(request.product_description)),
            CONTENT_SCHEMA,
        )
        if generation.degraded and not allow_placeholder:
            return RemediationResult.failure(DEGRADED_MESSAGE, degraded=True)
        content = parse_product_content(generation.text)

        def run():
            errors = store.update_product(
                product_id=request.product_id,
                title=content.new_title,
                description_html=content.new_description,
                seo_title=content.new_title,
                seo_description=content.new_meta_description,
            )
            return request.product_id, errors

        apply_mutations([Mutation(label=PRODUCT_UPDATE_LABEL, run=run)], continue_on_error=False)
    except (GenerationError, SchemaError, MutationError, StoreAPIError) as e:
        LOGGER.error("Content generation failed for %s: %s", request.product_id, e)
        return RemediationResult.failure(str(e))
    except Exception as e:
        LOGGER.exception("Content generation failed unexpectedly for %s", request.product_id)
        return RemediationResult.failure(
            str(e) or "An unexpected error occurred during content generation."
        )

    product_label = request.product_name or request.product_id
    return RemediationResult(
        success=True,
        message=(
            f"Product content for {product_label} has been successfully updated "
            f"with a {request.tone} tone."
        ),
        product_name=content.new_title,
        new_meta_description=content.new_meta_description,
        degraded=generation.degraded,
    )
