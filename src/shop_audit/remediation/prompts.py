"""Prompt templates for policy generation and product content rewrites."""

from ..models import ContentRequest, PolicyRequest


POLICY_PERSONA = (
    "You are a professional legal compliance assistant. Your task is to generate three "
    "legal documents (Privacy Policy, Terms of Service, Refund Policy) based on the "
    "user's business details. The output MUST be a JSON object adhering to the provided "
    "schema. The policy content must be in clean HTML format."
)

CONTENT_PERSONA = (
    "You are an expert SEO copywriter. You must rewrite the provided product content to "
    "be more engaging and optimized for search engines."
)

JURISDICTION_DIRECTIVES = {
    "EU_GDPR": (
        "The business serves customers in the European Union: reference the General Data "
        "Protection Regulation (GDPR), name the lawful bases for processing, data subject "
        "rights, and the 14-day withdrawal right for distance sales."
    ),
    "UK_GDPR": (
        "The business serves customers in the United Kingdom: reference the UK GDPR, the "
        "Data Protection Act 2018 and the Consumer Contracts Regulations."
    ),
    "US_CCPA": (
        "The business serves customers in the United States: reference the California "
        "Consumer Privacy Act (CCPA/CPRA), including the right to know, delete and opt out "
        "of the sale or sharing of personal information."
    ),
    "CA_PIPEDA": (
        "The business serves customers in Canada: reference the Personal Information "
        "Protection and Electronic Documents Act (PIPEDA)."
    ),
    "AU_PRIVACY": (
        "The business serves customers in Australia: reference the Privacy Act 1988, the "
        "Australian Privacy Principles and the Australian Consumer Law guarantees."
    ),
}

TONE_DIRECTIVES = {
    "Professional": "Professional: clear, credible and polished.",
    "Casual": "Casual & Witty: friendly, conversational and a little playful.",
    "Luxury": "Luxury & Exclusive: refined, evocative and aspirational.",
    "Minimalist": "Minimalist & Direct: short sentences, no filler, facts first.",
}


def jurisdiction_directive(jurisdiction: str) -> str:
    return JURISDICTION_DIRECTIVES.get(
        jurisdiction.strip().upper(),
        f"Comply with the consumer-protection and privacy law of {jurisdiction}.",
    )


def tone_directive(tone: str) -> str:
    return TONE_DIRECTIVES.get(tone, tone)


def policy_system_prompt(request: PolicyRequest) -> str:
    return f"{POLICY_PERSONA} {jurisdiction_directive(request.jurisdiction or '')}"


def policy_user_query(request: PolicyRequest) -> str:
    return (
        f'Generate policies for a business named "{request.business_name}" with contact '
        f'email "{request.contact_email}". Primary jurisdiction is set to '
        f'"{request.jurisdiction}". The refund period is {request.refund_days} days. '
        "Ensure policies are comprehensive and include standard clauses."
    )


def content_system_prompt(request: ContentRequest) -> str:
    return (
        f"{CONTENT_PERSONA} Adhere to a '{tone_directive(request.tone)}' tone. "
        f"Write all output in {request.target_language}. Your output MUST be valid JSON "
        "and conform strictly to the provided schema."
    )


def content_user_query(request: ContentRequest, description: str) -> str:
    return (
        f"Rewrite the following product content using a {request.tone} tone. "
        f'Original Title: "{request.product_name or ""}". '
        f'Original Description: "{description}". '
        f"Existing Tags: {request.product_tags or 'none'}. "
        "Generate a new product title, a new HTML product description, and a 120-155 "
        "character SEO meta description."
    )
