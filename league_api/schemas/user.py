"""User request schemas"""

from typing import ClassVar

from league_api.schemas.common import ResourceParams


class UserParams(ResourceParams):
    """Attributes a client may set on a user"""

    root_key: ClassVar[str] = "user"

    email: str | None = None
    password: str | None = None
    password_confirmation: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    team_id: int | None = None
