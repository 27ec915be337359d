"""Serializer registry: entity class -> how to render it"""

from dataclasses import dataclass

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from league_api.core.errors import RenderError


@dataclass(frozen=True)
class SerializerEntry:
    """Rendering rules for one entity kind"""

    type: str
    schema: type[BaseModel]
    human_name: str


class SerializerRegistry:
    """Explicit mapping filled at process start, no lookup by class name"""

    def __init__(self):
        self._entries: dict[type, SerializerEntry] = {}

    def register(
        self,
        model: type,
        schema: type[BaseModel],
        type_: str,
        human_name: str | None = None,
    ) -> SerializerEntry:
        """
        Register how instances of model are rendered

        Args:
            model: Entity class
            schema: Pydantic schema listing the serializable attributes
            type_: Plural resource name, e.g. "users" (casing is normalized)
            human_name: Name used in messages, defaults to the class name

        Returns:
            The stored entry
        """
        entry = SerializerEntry(
            type=to_camel(type_),
            schema=schema,
            human_name=human_name or model.__name__,
        )
        self._entries[model] = entry
        return entry

    def lookup(self, obj: object) -> SerializerEntry:
        """
        Find the entry for an instance or class, walking base classes

        Raises:
            RenderError: If nothing is registered for it
        """
        cls = obj if isinstance(obj, type) else type(obj)
        for klass in cls.__mro__:
            entry = self._entries.get(klass)
            if entry is not None:
                return entry
        raise RenderError(f"No serializer registered for {cls.__name__}")

    def human_name(self, model: type) -> str:
        try:
            return self.lookup(model).human_name
        except RenderError:
            return model.__name__

    def __contains__(self, model: type) -> bool:
        return model in self._entries

    def __len__(self) -> int:
        return len(self._entries)


# Global instance, populated by league_api.serializers.register_serializers
serializer_registry = SerializerRegistry()
