"""Data models for store audits and remediation runs."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SeoStatus:
    """Product SEO coverage counters."""
    total_products: int = 0
    optimized: int = 0
    checked: int = 0

    @property
    def needing_fix(self) -> int:
        return self.checked - self.optimized


@dataclass
class AuditResult:
    """Scores and recommendations for a single store audit."""
    compliance_score: int = 0  # 0-50
    seo_score: int = 0  # 0-50
    compliance_status: dict[str, bool] = field(default_factory=dict)
    seo_status: SeoStatus = field(default_factory=SeoStatus)
    recommendations: list[str] = field(default_factory=list)

    @property
    def total_score(self) -> int:
        return self.compliance_score + self.seo_score

    def to_dict(self) -> dict[str, Any]:
        return {
            "compliance_score": self.compliance_score,
            "seo_score": self.seo_score,
            "total_score": self.total_score,
            "compliance_status": dict(self.compliance_status),
            "seo_status": {
                "total_products": self.seo_status.total_products,
                "optimized": self.seo_status.optimized,
                "checked": self.seo_status.checked,
            },
            "recommendations": list(self.recommendations),
        }


@dataclass
class AuditOutcome:
    """Audit entry point result; ``audit_data`` is populated even on failure."""
    success: bool
    audit_data: AuditResult
    errors: list[str] = field(default_factory=list)


@dataclass
class PolicyRequest:
    """Business details used to draft legal policy pages."""
    business_name: str | None = None
    contact_email: str | None = None
    jurisdiction: str | None = None
    refund_days: str | None = None


@dataclass
class ContentRequest:
    """A product whose title, description and meta description get rewritten."""
    product_id: str | None = None
    product_name: str | None = None
    product_description: str | None = None
    product_tags: str | None = None
    tone: str = "Professional"
    target_language: str = "English"


@dataclass
class PolicyContent:
    """HTML bodies for the three generated policy documents."""
    privacy_policy: str
    terms_of_service: str
    refund_policy: str


@dataclass
class ProductContent:
    """Rewritten product copy."""
    new_title: str
    new_description: str
    new_meta_description: str


@dataclass
class PolicyPageResult:
    """A policy page created in the store."""
    policy: str
    url: str


@dataclass
class RemediationResult:
    """Outcome of a remediation pipeline; ``errors`` is empty iff ``success``."""
    success: bool
    errors: list[str] = field(default_factory=list)
    message: str | None = None
    policy_results: list[PolicyPageResult] = field(default_factory=list)
    product_name: str | None = None
    new_meta_description: str | None = None
    degraded: bool = False

    @classmethod
    def failure(cls, *errors: str, degraded: bool = False) -> "RemediationResult":
        return cls(success=False, errors=list(errors), degraded=degraded)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "errors": list(self.errors),
            "message": self.message,
            "degraded": self.degraded,
        }
        if self.policy_results:
            data["policy_results"] = [
                {"policy": r.policy, "url": r.url} for r in self.policy_results
            ]
        if self.product_name is not None:
            data["product_name"] = self.product_name
            data["new_meta_description"] = self.new_meta_description
        return data
