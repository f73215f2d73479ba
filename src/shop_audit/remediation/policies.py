"""Policy Generation pipeline: draft legal pages with Gemini and publish them."""

import logging

from bs4 import BeautifulSoup

from ..gemini import GeminiClient, GenerationError
from ..models import PolicyContent, PolicyPageResult, PolicyRequest, RemediationResult
from ..schema import SchemaError, obj, parse_structured, string
from ..shopify import ShopifyAdmin
from .apply import Mutation, apply_mutations
from .prompts import policy_system_prompt, policy_user_query


LOGGER = logging.getLogger(__name__)

DEGRADED_MESSAGE = "Gemini API key is not configured; no content was generated."

POLICY_SCHEMA = obj({
    "privacyPolicyContent": string("The complete HTML content for the Privacy Policy."),
    "termsOfServiceContent": string("The complete HTML content for the Terms of Service."),
    "refundPolicyContent": string("The complete HTML content for the Refund Policy."),
})

# (page title, page handle, schema field), in creation order
POLICY_PAGES = [
    ("Privacy Policy", "privacy-policy", "privacyPolicyContent"),
    ("Terms of Service", "terms-of-service", "termsOfServiceContent"),
    ("Refund Policy", "refund-policy", "refundPolicyContent"),
]

_REQUIRED_FIELDS = [
    ("business_name", "businessName"),
    ("contact_email", "contactEmail"),
    ("jurisdiction", "jurisdiction"),
    ("refund_days", "refundDays"),
]


def validate_policy_request(request: PolicyRequest) -> list[str]:
    missing = [label for attr, label in _REQUIRED_FIELDS
               if not str(getattr(request, attr) or "").strip()]
    if missing:
        return [f"Missing required business details: {', '.join(missing)}."]

    refund_days = str(request.refund_days).strip()
    if not refund_days.isdecimal() or int(refund_days) <= 0:
        return [f"Refund period must be a positive whole number of days, got {refund_days!r}."]
    return []


def has_visible_text(html: str) -> bool:
    return bool(BeautifulSoup(html, "lxml").get_text(strip=True))


def parse_policy_content(text: str) -> PolicyContent:
    """Parse the generated JSON into policy bodies.

    Raises:
        SchemaError: malformed JSON, missing fields, or an empty document
    """
    payload = parse_structured(text, POLICY_SCHEMA)
    empty = [field for _, _, field in POLICY_PAGES if not has_visible_text(payload[field])]
    if empty:
        raise SchemaError(f"AI response contained empty documents: {', '.join(empty)}")

    return PolicyContent(
        privacy_policy=payload["privacyPolicyContent"],
        terms_of_service=payload["termsOfServiceContent"],
        refund_policy=payload["refundPolicyContent"],
    )


def _page_creator(store: ShopifyAdmin, title: str, handle: str, body: str):
    def run():
        created = store.create_page(title=title, body_html=body, handle=handle, published=True)
        return created.page_id, created.user_errors
    return run


def apply_policies(
    request: PolicyRequest,
    *,
    generator: GeminiClient,
    store: ShopifyAdmin,
    allow_placeholder: bool = False,
) -> RemediationResult:
    """Generate Privacy, Terms and Refund policies and create them as store pages.

    All three pages are attempted even if one is rejected; any rejection makes
    the result a failure while the pages that were created are still listed.

    Args:
        request: Business details
        generator: Generative client
        store: Store API client
        allow_placeholder: Publish placeholder content when no API key is set

    Returns:
        RemediationResult with ``policy_results`` for each created page
    """
    problems = validate_policy_request(request)
    if problems:
        return RemediationResult.failure(*problems)

    try:
        generation = generator.generate(
            policy_system_prompt(request), policy_user_query(request), POLICY_SCHEMA
        )
        if generation.degraded and not allow_placeholder:
            return RemediationResult.failure(DEGRADED_MESSAGE, degraded=True)
        content = parse_policy_content(generation.text)
    except (GenerationError, SchemaError) as e:
        LOGGER.error("Policy generation failed: %s", e)
        return RemediationResult.failure(f"AI Policy Generation Failed: {e}")
    except Exception as e:
        LOGGER.exception("Policy generation failed unexpectedly")
        return RemediationResult.failure(f"AI Policy Generation Failed: {e}")

    bodies = {
        "privacyPolicyContent": content.privacy_policy,
        "termsOfServiceContent": content.terms_of_service,
        "refundPolicyContent": content.refund_policy,
    }
    mutations = [
        Mutation(label=title, run=_page_creator(store, title, handle, bodies[field]))
        for title, handle, field in POLICY_PAGES
    ]

    try:
        outcome = apply_mutations(mutations, continue_on_error=True)
        policy_results = [
            PolicyPageResult(policy=title, url=store.admin_page_url(page_id))
            for title, page_id in outcome.results
        ]
    except Exception as e:
        LOGGER.exception("Creating policy pages failed")
        return RemediationResult.failure(f"Shopify API Integration Error: {e}")

    if not outcome.ok:
        return RemediationResult(
            success=False,
            errors=outcome.errors,
            policy_results=policy_results,
            degraded=generation.degraded,
        )

    LOGGER.info("Created %d policy pages on %s", len(policy_results), store.shop)
    return RemediationResult(
        success=True,
        message="All policies successfully generated and created on Shopify.",
        policy_results=policy_results,
        degraded=generation.degraded,
    )
