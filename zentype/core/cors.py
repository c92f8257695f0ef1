"""
CORS para el cliente web de ZenType

El preflight se contesta acá, antes del ruteo. Las respuestas a orígenes
permitidos exponen el header de correlación para que el cliente lo pueda leer.
"""

import re
from typing import Iterable, Optional

from fastapi import Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware

from zentype.core.config import Settings

# La API solo tiene lecturas (GET) y envíos (POST)
ALLOWED_METHODS = ("GET", "POST", "OPTIONS")
ALLOWED_HEADERS = ("Authorization", "Content-Type", "Accept")
PREFLIGHT_MAX_AGE = 60 * 60 * 24


class OriginPolicy:
    """Orígenes permitidos: una lista fija y, opcionalmente, un patrón"""

    def __init__(self, origins: Iterable[str], pattern: Optional[str] = None):
        self.origins = {origin.strip() for origin in origins if origin.strip()}
        self.pattern = re.compile(pattern) if pattern else None

    @classmethod
    def from_settings(cls, settings: Settings) -> "OriginPolicy":
        return cls(settings.cors_origins.split(","), settings.cors_origin_regex or None)

    def allows(self, origin: Optional[str]) -> bool:
        if not origin:
            return False
        if origin in self.origins:
            return True
        # El patrón tiene que cubrir el origen entero
        return bool(self.pattern and self.pattern.fullmatch(origin))


class WebClientCORSMiddleware(BaseHTTPMiddleware):
    """Preflight sin pasar por los routers y headers CORS en las respuestas"""

    def __init__(self, app, policy: OriginPolicy, correlation_header: str = "x-correlation-id"):
        super().__init__(app)
        self.policy = policy
        self.correlation_header = correlation_header

    def preflight_response(self, origin: str) -> Response:
        if not self.policy.allows(origin):
            return Response(status_code=403, content="Origin not allowed")

        return Response(
            status_code=200,
            headers={
                "Access-Control-Allow-Origin": origin,
                "Access-Control-Allow-Methods": ", ".join(ALLOWED_METHODS),
                "Access-Control-Allow-Headers": ", ".join((*ALLOWED_HEADERS, self.correlation_header)),
                "Access-Control-Allow-Credentials": "true",
                "Access-Control-Max-Age": str(PREFLIGHT_MAX_AGE),
                "Vary": "Origin",
            }
        )

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin", "")

        if request.method == "OPTIONS" and "access-control-request-method" in request.headers:
            return self.preflight_response(origin)

        response = await call_next(request)

        if self.policy.allows(origin):
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Access-Control-Expose-Headers"] = self.correlation_header
            response.headers["Vary"] = "Origin"

        return response
