"""HTTP responses built from rendered envelopes"""

from typing import Any, Protocol

from fastapi import Response
from fastapi.responses import JSONResponse

from league_api.core.errors import RecordInvalid, RecordNotFound
from league_api.rendering.registry import SerializerRegistry, serializer_registry
from league_api.rendering.renderer import CollectionRenderer, ObjectRenderer


def error_envelope(name: str, message: Any = None) -> dict[str, Any]:
    """{"data": {"errorName": ..., "errorMessage": ...}} with None values dropped"""
    body = {"errorName": name, "errorMessage": message}
    return {"data": {key: value for key, value in body.items() if value is not None}}


class Renderable(Protocol):
    """Capability every output-producing endpoint delegates to"""

    def render_object(self, obj: Any, options: dict | None = None, status_code: int = 200) -> Response: ...

    def render_collection(self, objs: Any, options: dict | None = None) -> Response: ...

    def render_error(self, name: str, message: Any, status_code: int) -> Response: ...


class ResponseRenderer:
    """Default Renderable backed by the serializer registry"""

    def __init__(self, registry: SerializerRegistry | None = None):
        self.registry = registry or serializer_registry

    def render_object(self, obj: Any, options: dict | None = None, status_code: int = 200) -> Response:
        body = ObjectRenderer(obj, options, registry=self.registry).render()
        return self.render_response(body, status_code)

    def render_created(self, obj: Any, options: dict | None = None) -> Response:
        return self.render_object(obj, options, status_code=201)

    def render_collection(self, objs: Any, options: dict | None = None) -> Response:
        body = CollectionRenderer(objs, options, registry=self.registry).render()
        return self.render_response(body, 200)

    def render_deleted(self) -> Response:
        return Response(status_code=204)

    def render_record_invalid(self, exc: RecordInvalid) -> Response:
        return self.render_error("invalid_record", exc.errors, 422)

    def render_record_not_found(self, exc: RecordNotFound) -> Response:
        return self.render_error("record_not_found", f"{exc.model} not found", 404)

    def render_unauthorized(self) -> Response:
        return self.render_error(
            "unauthorized",
            None,
            401,
            headers={"WWW-Authenticate": 'Bearer realm="League API"'},
        )

    def render_forbidden(self, message: str) -> Response:
        return self.render_error("forbidden", message, 403)

    def render_error(
        self,
        name: str,
        message: Any,
        status_code: int,
        headers: dict[str, str] | None = None,
    ) -> Response:
        return self.render_response(error_envelope(name, message), status_code, headers)

    def render_response(
        self,
        body: dict[str, Any],
        status_code: int,
        headers: dict[str, str] | None = None,
    ) -> Response:
        return JSONResponse(content=body, status_code=status_code, headers=headers)


# Global instance
response_renderer = ResponseRenderer()
