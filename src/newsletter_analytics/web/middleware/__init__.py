# ABOUTME: Middleware module for web application.
# ABOUTME: Exports scheduler authentication dependencies.

from newsletter_analytics.web.middleware.oidc import OIDCVerified, verify_oidc_token

__all__ = ["OIDCVerified", "verify_oidc_token"]
