"""Generate-then-apply remediation pipelines."""

from .content import apply_content
from .policies import apply_policies

__all__ = ["apply_content", "apply_policies"]
