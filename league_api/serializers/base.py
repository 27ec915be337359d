"""Base serializer schema"""

from pydantic import AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SerializerSchema(BaseModel):
    """Reads attributes off ORM objects, writes lowerCamelCase keys"""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )
