"""Security headers middleware for the portal's responses."""
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from school_portal.core.config import get_settings


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        settings = get_settings()

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        # The portal only serves JSON, so nothing else may be loaded or framed
        response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"

        # Strict Transport Security (HTTPS only)
        if not settings.DEBUG and request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        # Page data is request scoped and must not be cached by intermediaries
        response.headers.setdefault("Cache-Control", "no-store")

        if "server" in response.headers:
            del response.headers["server"]

        return response
