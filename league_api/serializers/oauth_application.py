"""OAuth application serializers"""

from datetime import datetime

from pydantic import Field

from league_api.serializers.base import SerializerSchema


class OAuthApplicationSerializer(SerializerSchema):
    name: str
    uid: str
    redirect_uri: str
    scopes: str
    confidential: bool
    created_at: datetime
    updated_at: datetime


class CreatedOAuthApplicationSerializer(OAuthApplicationSerializer):
    """Includes the plaintext secret, only available right after creation"""

    secret: str | None = Field(default=None, validation_alias="plaintext_secret")
