"""Hand-written doubles for the store API and the generative client."""

import json

from shop_audit.gemini import GenerationError, GenerationResult
from shop_audit.shopify import PageCreateResult, ProductSeo, ProductSeoListing

ALL_HANDLES = ["privacy-policy", "refund-policy", "shipping-policy", "terms-of-service"]

POLICY_JSON = json.dumps({
    "privacyPolicyContent": "<h1>Privacy Policy</h1><p>We respect your data.</p>",
    "termsOfServiceContent": "<h1>Terms of Service</h1><p>Be nice.</p>",
    "refundPolicyContent": "<h1>Refund Policy</h1><p>30 days.</p>",
})

META = "Sit in comfort all day with an ergonomic office chair built for posture, breathable mesh and adjustable lumbar support that keeps you focused."

CONTENT_JSON = json.dumps({
    "newTitle": "ErgoPro Office Chair",
    "newDescription": "<p>Work longer in comfort.</p>",
    "newMetaDescription": META,
})


class FakeStore:
    shop = "example.myshopify.com"

    def __init__(
        self,
        present=ALL_HANDLES,
        page_titles=(),
        descriptions=(),
        total_count=None,
        page_errors=None,
        update_errors=(),
        fail_on=None,
    ):
        self.present = set(present)
        self.page_titles = list(page_titles)
        self.descriptions = list(descriptions)
        self.total_count = len(self.descriptions) if total_count is None else total_count
        self.page_errors = page_errors or {}
        self.update_errors = list(update_errors)
        self.fail_on = fail_on or {}
        self.calls = []
        self.created = []
        self.updates = []

    def _record(self, name):
        self.calls.append(name)
        if name in self.fail_on:
            raise self.fail_on[name]

    def fetch_policy_handles(self):
        self._record("fetch_policy_handles")
        return {h: (h if h in self.present else None) for h in ALL_HANDLES}

    def list_page_titles(self, first=250):
        self._record("list_page_titles")
        return list(self.page_titles)

    def list_product_seo(self, first=250):
        self._record("list_product_seo")
        return ProductSeoListing(
            total_count=self.total_count,
            products=[
                ProductSeo(id=f"gid://shopify/Product/{i}", meta_description=d)
                for i, d in enumerate(self.descriptions)
            ],
        )

    def create_page(self, title, body_html, handle, published=True):
        self._record("create_page")
        self.created.append({"title": title, "body": body_html, "handle": handle,
                             "published": published})
        if title in self.page_errors:
            return PageCreateResult(user_errors=[self.page_errors[title]])
        return PageCreateResult(page_id=f"gid://shopify/Page/{len(self.created)}", handle=handle)

    def update_product(self, product_id, title, description_html, seo_title, seo_description):
        self._record("update_product")
        self.updates.append({
            "id": product_id,
            "title": title,
            "description_html": description_html,
            "seo_title": seo_title,
            "seo_description": seo_description,
        })
        return list(self.update_errors)

    def admin_page_url(self, page_id):
        return f"https://{self.shop}/admin/pages/{page_id.rsplit('/', 1)[-1]}"


class FakeGenerator:
    def __init__(self, text="", degraded=False, error=None):
        self.text = text
        self.degraded = degraded
        self.error = error
        self.calls = []

    def generate(self, system_prompt, user_query, schema=None):
        self.calls.append((system_prompt, user_query, schema))
        if self.error:
            raise self.error
        return GenerationResult(text=self.text, attempts=0 if self.degraded else 1,
                                degraded=self.degraded)


def failing_generator(message="API call failed with status: 500"):
    return FakeGenerator(error=GenerationError(message, status_code=500, attempts=1))
