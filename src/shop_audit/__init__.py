"""Shop Audit - policy compliance and product SEO audit with AI remediation."""

__version__ = "0.1.0"
