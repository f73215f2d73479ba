"""Shopify Admin GraphQL adapter for audit reads and remediation writes."""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from .config import ShopifySettings


LOGGER = logging.getLogger(__name__)

# Policy type in the Admin API -> canonical storefront handle
POLICY_TYPES = {
    "PRIVACY_POLICY": "privacy-policy",
    "REFUND_POLICY": "refund-policy",
    "SHIPPING_POLICY": "shipping-policy",
    "TERMS_OF_SERVICE": "terms-of-service",
}

POLICY_CHECK_QUERY = """
query getPolicyPages {
  shop {
    shopPolicies {
      type
      title
      body
    }
  }
}
"""

PAGE_TITLES_QUERY = """
query checkDuplicatePages($first: Int!) {
  pages(first: $first) {
    edges {
      node {
        title
      }
    }
  }
}
"""

PRODUCT_SEO_QUERY = """
query productSeoCheck($first: Int!) {
  products(first: $first) {
    nodes {
      id
      seo {
        description
      }
    }
  }
  productsCount {
    count
  }
}
"""

PAGE_CREATE_MUTATION = """
mutation pageCreate($page: PageCreateInput!) {
  pageCreate(page: $page) {
    page {
      id
      handle
      title
    }
    userErrors {
      field
      message
    }
  }
}
"""

PRODUCT_UPDATE_MUTATION = """
mutation productUpdate($product: ProductUpdateInput!) {
  productUpdate(product: $product) {
    product {
      id
      title
    }
    userErrors {
      field
      message
    }
  }
}
"""


class StoreAPIError(Exception):
    """The store API could not be reached or rejected the whole request."""


@dataclass(frozen=True)
class StoreSession:
    """Authenticated shop handle supplied by the host app."""
    shop: str
    access_token: str


@dataclass
class ProductSeo:
    id: str
    meta_description: str | None = None


@dataclass
class ProductSeoListing:
    total_count: int = 0
    products: list[ProductSeo] = field(default_factory=list)


@dataclass
class PageCreateResult:
    """Outcome of a single ``pageCreate`` mutation."""
    page_id: str | None = None
    handle: str | None = None
    user_errors: list[str] = field(default_factory=list)


def _user_errors(payload: dict[str, Any] | None) -> list[str]:
    errors = (payload or {}).get("userErrors") or []
    return [str(e.get("message") or e) for e in errors]


class ShopifyAdmin:
    """Thin client over ``/admin/api/{version}/graphql.json``."""

    def __init__(
        self,
        session: StoreSession,
        settings: ShopifySettings | None = None,
        http_client: httpx.Client | None = None,
    ):
        self.session = session
        self.settings = settings or ShopifySettings()
        self._http_client = http_client

    @property
    def shop(self) -> str:
        return self.session.shop

    @property
    def endpoint(self) -> str:
        return f"https://{self.session.shop}/admin/api/{self.settings.api_version}/graphql.json"

    def graphql(self, query: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a GraphQL operation and return its ``data`` object.

        Raises:
            StoreAPIError: on transport failure, non-200 status, or top-level
                GraphQL ``errors``.
        """
        body: dict[str, Any] = {"query": query}
        if variables:
            body["variables"] = variables
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self.session.access_token,
        }

        try:
            if self._http_client is not None:
                response = self._http_client.post(self.endpoint, headers=headers, json=body)
            else:
                with httpx.Client(timeout=self.settings.timeout) as client:
                    response = client.post(self.endpoint, headers=headers, json=body)
        except httpx.TimeoutException as e:
            raise StoreAPIError(f"Shopify request timed out after {self.settings.timeout}s") from e
        except httpx.RequestError as e:
            raise StoreAPIError(f"Shopify request failed: {e}") from e

        if response.status_code != 200:
            raise StoreAPIError(f"Shopify API error {response.status_code}: {response.text[:500]}")

        try:
            result = response.json()
        except ValueError as e:
            raise StoreAPIError("Shopify API returned a non-JSON body") from e

        if result.get("errors"):
            messages = [str(e.get("message", e)) if isinstance(e, dict) else str(e)
                        for e in result["errors"]]
            raise StoreAPIError("Shopify GraphQL error: " + "; ".join(messages))

        return result.get("data") or {}

    # Reads

    def fetch_policy_handles(self) -> dict[str, str | None]:
        """Map each canonical policy handle to itself if the policy has a body, else None."""
        data = self.graphql(POLICY_CHECK_QUERY)
        handles: dict[str, str | None] = {handle: None for handle in POLICY_TYPES.values()}
        for policy in (data.get("shop") or {}).get("shopPolicies") or []:
            handle = POLICY_TYPES.get(policy.get("type"))
            if handle and (policy.get("body") or "").strip():
                handles[handle] = handle
        return handles

    def list_page_titles(self, first: int = 250) -> list[str]:
        data = self.graphql(PAGE_TITLES_QUERY, {"first": first})
        edges = (data.get("pages") or {}).get("edges") or []
        return [edge["node"]["title"] for edge in edges if (edge.get("node") or {}).get("title")]

    def list_product_seo(self, first: int = 250) -> ProductSeoListing:
        data = self.graphql(PRODUCT_SEO_QUERY, {"first": first})
        nodes = (data.get("products") or {}).get("nodes") or []
        count = (data.get("productsCount") or {}).get("count") or 0
        return ProductSeoListing(
            total_count=int(count),
            products=[
                ProductSeo(id=node["id"], meta_description=(node.get("seo") or {}).get("description"))
                for node in nodes
            ],
        )

    # Writes

    def create_page(
        self, title: str, body_html: str, handle: str, published: bool = True
    ) -> PageCreateResult:
        data = self.graphql(PAGE_CREATE_MUTATION, {
            "page": {
                "title": title,
                "body": body_html,
                "handle": handle,
                "isPublished": published,
            }
        })
        payload = data.get("pageCreate") or {}
        page = payload.get("page") or {}
        return PageCreateResult(
            page_id=page.get("id"),
            handle=page.get("handle"),
            user_errors=_user_errors(payload),
        )

    def update_product(
        self,
        product_id: str,
        title: str,
        description_html: str,
        seo_title: str,
        seo_description: str,
    ) -> list[str]:
        """Update a product's copy and SEO fields; returns store-side user errors."""
        data = self.graphql(PRODUCT_UPDATE_MUTATION, {
            "product": {
                "id": product_id,
                "title": title,
                "descriptionHtml": description_html,
                "seo": {"title": seo_title, "description": seo_description},
            }
        })
        return _user_errors(data.get("productUpdate"))

    def admin_page_url(self, page_id: str) -> str:
        return f"https://{self.session.shop}/admin/pages/{page_id.rsplit('/', 1)[-1]}"
