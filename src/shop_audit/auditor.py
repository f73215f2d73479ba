"""Store audit: legal policy compliance and product SEO coverage."""

import logging

from .models import AuditOutcome, AuditResult, SeoStatus
from .shopify import ShopifyAdmin, StoreAPIError


LOGGER = logging.getLogger(__name__)

# (display name, canonical handle), in recommendation order
REQUIRED_POLICIES = [
    ("Privacy Policy", "privacy-policy"),
    ("Refund Policy", "refund-policy"),
    ("Shipping Policy", "shipping-policy"),
    ("Terms of Service", "terms-of-service"),
]

COMPLIANCE_MAX_SCORE = 50
SEO_MAX_SCORE = 50
PAGE_SCAN_LIMIT = 250
PRODUCT_SCAN_LIMIT = 250
MIN_META_DESCRIPTION_LENGTH = 10  # descriptions must be longer than this


def proportional_score(count: int, total: int, max_score: int) -> int:
    """floor(count / total * max_score), or 0 when there is nothing to measure."""
    if total <= 0:
        return 0
    return (count * max_score) // total


def is_seo_optimized(meta_description: str | None) -> bool:
    return len(meta_description or "") > MIN_META_DESCRIPTION_LENGTH


def check_policies(store: ShopifyAdmin, result: AuditResult) -> None:
    """Score the four required policy slots and flag the missing ones."""
    handles = store.fetch_policy_handles()
    present = 0

    for name, handle in REQUIRED_POLICIES:
        is_present = bool(handles.get(handle))
        result.compliance_status[name] = is_present
        if is_present:
            present += 1
        else:
            result.recommendations.append(
                f"Missing critical policy: {name}. Use the Policy Generator to fix."
            )

    result.compliance_score = proportional_score(
        present, len(REQUIRED_POLICIES), COMPLIANCE_MAX_SCORE
    )


def check_duplicate_titles(store: ShopifyAdmin, result: AuditResult) -> None:
    """Warn when several pages carry the same policy title. Does not affect scores."""
    titles = store.list_page_titles(first=PAGE_SCAN_LIMIT)

    for name, _ in REQUIRED_POLICIES:
        count = sum(1 for title in titles if name in title)
        if count > 1:
            result.recommendations.append(
                f'Warning: Found {count} pages containing the title "{name}". '
                "Delete duplicates to improve SEO."
            )


def check_product_seo(store: ShopifyAdmin, result: AuditResult) -> None:
    """Score meta description coverage over the first products in the catalog."""
    listing = store.list_product_seo(first=PRODUCT_SCAN_LIMIT)
    checked = len(listing.products)
    optimized = sum(1 for p in listing.products if is_seo_optimized(p.meta_description))

    result.seo_status = SeoStatus(
        total_products=listing.total_count,
        optimized=optimized,
        checked=checked,
    )
    result.seo_score = proportional_score(optimized, checked, SEO_MAX_SCORE)

    if result.seo_status.needing_fix > 0:
        result.recommendations.append(
            f"Found {result.seo_status.needing_fix} products needing SEO meta descriptions. "
            "Use the Content Writer for bulk optimization."
        )


def audit_store(store: ShopifyAdmin) -> AuditOutcome:
    """Run a complete compliance and SEO audit against a store.

    Checks run in order (policies, duplicate titles, product SEO) and the first
    failure stops the rest.

    Args:
        store: Store API client

    Returns:
        AuditOutcome; on failure ``audit_data`` holds whatever was scored
        before the error so callers can still render the scorecards.
    """
    result = AuditResult()

    try:
        check_policies(store, result)
        check_duplicate_titles(store, result)
        check_product_seo(store, result)
    except StoreAPIError as e:
        LOGGER.error("Store audit failed: %s", e)
        return AuditOutcome(
            success=False,
            audit_data=result,
            errors=[f"Failed to run audit: {e}. Ensure permissions are granted."],
        )
    except Exception as e:
        LOGGER.exception("Store audit failed unexpectedly")
        return AuditOutcome(
            success=False,
            audit_data=result,
            errors=[f"Failed to run audit: {e}. Ensure permissions are granted."],
        )

    LOGGER.info(
        "Store audit complete: total=%d compliance=%d seo=%d recommendations=%d",
        result.total_score,
        result.compliance_score,
        result.seo_score,
        len(result.recommendations),
    )
    return AuditOutcome(success=True, audit_data=result)
