"""Object and collection renderers producing ``{"data": ...}`` envelopes"""

from collections.abc import Iterable
from typing import Any

from pydantic.alias_generators import to_camel

from league_api.core.errors import RenderError
from league_api.rendering.registry import SerializerRegistry, serializer_registry


class Renderer:
    """
    Base renderer

    Options:
        fields: attribute names to keep (snake or camel case)
        meta: dict added to the envelope under "meta"
        serializer: pydantic schema overriding the registered one
        type: resource type overriding the registered one
    """

    def __init__(
        self,
        obj: Any,
        options: dict[str, Any] | None = None,
        registry: SerializerRegistry | None = None,
    ):
        self.obj = obj
        self.options = options or {}
        self.registry = registry or serializer_registry

    def render(self) -> dict[str, Any]:
        self.validate()
        envelope = {"data": self.render_successful_response()}
        if self.options.get("meta"):
            envelope["meta"] = self.options["meta"]
        return envelope

    def validate(self) -> None:
        if self.obj is None:
            raise RenderError("Provided object must not be nil")

    def is_a_collection(self) -> bool:
        return isinstance(self.obj, Iterable) and not isinstance(self.obj, (str, bytes, dict))

    def render_successful_response(self) -> Any:
        raise NotImplementedError("Subclasses must implement render_successful_response")

    def serialize_resource(self, resource: Any) -> dict[str, Any]:
        """Render one entity as {id, type, attributes}"""
        if resource is None:
            raise RenderError("Provided object must not be nil")

        entry = self.registry.lookup(resource)
        schema = self.options.get("serializer") or entry.schema

        attributes = schema.model_validate(resource).model_dump(by_alias=True, mode="json")

        fields = self.options.get("fields")
        if fields:
            wanted = {to_camel(name) for name in fields}
            attributes = {key: value for key, value in attributes.items() if key in wanted}

        return {
            "id": str(resource.id),
            "type": self.options.get("type") or entry.type,
            "attributes": attributes,
        }


class ObjectRenderer(Renderer):
    """Renders a single entity"""

    def validate(self) -> None:
        super().validate()
        if self.is_a_collection():
            raise RenderError("ObjectRenderer expects a single object, got a collection")

    def render_successful_response(self) -> dict[str, Any]:
        return self.serialize_resource(self.obj)


class CollectionRenderer(Renderer):
    """Renders a homogeneous collection of entities"""

    def validate(self) -> None:
        super().validate()
        if not self.is_a_collection():
            raise RenderError("CollectionRenderer expects a collection")

        self.obj = list(self.obj)
        kinds = {type(item) for item in self.obj}
        if len(kinds) > 1:
            names = ", ".join(sorted(kind.__name__ for kind in kinds))
            raise RenderError(f"Collection must be homogeneous, got: {names}")

    def render_successful_response(self) -> list[dict[str, Any]]:
        return [self.serialize_resource(item) for item in self.obj]
