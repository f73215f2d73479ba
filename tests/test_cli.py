import json

from click.testing import CliRunner

from shop_audit.cli import cli, print_score_bar, score_color
from shop_audit.config import GeminiSettings, Settings
from shop_audit.models import AuditOutcome, AuditResult, PolicyPageResult, RemediationResult


SETTINGS = Settings(
    gemini=GeminiSettings(api_key=None),
    shop="example.myshopify.com",
    access_token="shpat_test",
)


def invoke(args):
    return CliRunner().invoke(cli, args, obj={"settings": SETTINGS})


def test_audit_json_output(monkeypatch):
    seen = {}

    def fake_audit(store):
        seen["shop"] = store.shop
        return AuditOutcome(
            success=True,
            audit_data=AuditResult(
                compliance_score=25,
                seo_score=35,
                compliance_status={"Privacy Policy": True, "Refund Policy": False},
                recommendations=["Missing critical policy: Refund Policy. Use the Policy Generator to fix."],
            ),
        )

    monkeypatch.setattr("shop_audit.cli.audit_store", fake_audit)

    result = invoke(["audit", "--json"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["audit_data"]["total_score"] == 60
    assert payload["audit_data"]["recommendations"][0].startswith("Missing critical policy")
    assert seen["shop"] == "example.myshopify.com"


def test_failed_audit_exits_non_zero(monkeypatch):
    monkeypatch.setattr(
        "shop_audit.cli.audit_store",
        lambda store: AuditOutcome(success=False, audit_data=AuditResult(), errors=["Failed to run audit: x"]),
    )

    result = invoke(["audit"])

    assert result.exit_code == 1
    assert "Failed to run audit" in result.output


def test_policies_command_builds_request(monkeypatch):
    captured = {}

    def fake_apply(request, *, generator, store, allow_placeholder):
        captured["request"] = request
        captured["allow_placeholder"] = allow_placeholder
        return RemediationResult(
            success=True,
            message="All policies successfully generated and created on Shopify.",
            policy_results=[PolicyPageResult("Privacy Policy", "https://example.myshopify.com/admin/pages/1")],
        )

    monkeypatch.setattr("shop_audit.cli.apply_policies", fake_apply)

    result = invoke([
        "policies", "--business-name", "Acme", "--contact-email", "hi@acme.test",
        "--refund-days", "14", "--json",
    ])

    assert result.exit_code == 0, result.output
    assert captured["request"].jurisdiction == "EU_GDPR"
    assert captured["request"].refund_days == "14"
    assert captured["allow_placeholder"] is False
    assert json.loads(result.output)["policy_results"][0]["policy"] == "Privacy Policy"


def test_rewrite_command_reports_failure(monkeypatch):
    monkeypatch.setattr(
        "shop_audit.cli.apply_content",
        lambda request, **kwargs: RemediationResult.failure("Shopify Product Update failed: nope"),
    )

    result = invoke(["rewrite", "gid://shopify/Product/1", "--tone", "Casual"])

    assert result.exit_code == 1
    assert "Shopify Product Update failed" in result.output


def test_missing_store_credentials_is_a_usage_error():
    result = CliRunner().invoke(cli, ["audit"], obj={"settings": Settings()})

    assert result.exit_code == 2
    assert "SHOPIFY_SHOP" in result.output


def test_score_helpers():
    assert score_color(85) == "green"
    assert score_color(20, 50) == "orange1"
    assert print_score_bar(50, width=10).plain == "█████░░░░░ 50/100"
