"""Response rendering"""

from league_api.rendering.registry import SerializerEntry, SerializerRegistry, serializer_registry
from league_api.rendering.renderer import CollectionRenderer, ObjectRenderer, Renderer
from league_api.rendering.responses import (
    Renderable,
    ResponseRenderer,
    error_envelope,
    response_renderer,
)

__all__ = [
    "SerializerEntry",
    "SerializerRegistry",
    "serializer_registry",
    "Renderer",
    "ObjectRenderer",
    "CollectionRenderer",
    "Renderable",
    "ResponseRenderer",
    "response_renderer",
    "error_envelope",
]
