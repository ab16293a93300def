from __future__ import annotations

from django.utils.deprecation import MiddlewareMixin


class ContentSecurityPolicyMiddleware(MiddlewareMixin):
    """Add a Content-Security-Policy header to every response.

    The API only serves JSON, uploaded media and the Swagger page, so the
    policy is strict everywhere except /api/docs, which loads Swagger UI
    assets from the jsDelivr CDN.
    """

    docs_path = "/api/docs"

    def process_response(self, request, response):  # noqa: D401
        script_src = "'self'"
        style_src = "'self'"
        img_src = "'self' data:"
        if request.path.rstrip("/") == self.docs_path:
            script_src = "'self' 'unsafe-inline' https://cdn.jsdelivr.net"
            style_src = "'self' 'unsafe-inline' https://cdn.jsdelivr.net"
            img_src = "'self' data: https://cdn.jsdelivr.net"

        csp = (
            "default-src 'self'; "
            f"img-src {img_src}; "
            f"script-src {script_src}; "
            f"style-src {style_src}; "
            "media-src 'self'; "
            "connect-src 'self' ws: wss:; "
            "frame-ancestors 'none'"
        )
        response["Content-Security-Policy"] = csp
        return response
