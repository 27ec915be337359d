"""User serializer"""

from league_api.serializers.base import SerializerSchema


class UserSerializer(SerializerSchema):
    email: str
    first_name: str
    last_name: str
