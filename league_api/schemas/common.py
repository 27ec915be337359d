"""Shared request schema helpers"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, ValidationError

from league_api.core.errors import RecordInvalid


class ResourceParams(BaseModel):
    """Permitted attributes for a resource write

    Accepts either ``{"<root_key>": {...attributes}}`` or the bare attribute
    object. Unknown keys are dropped.
    """

    model_config = ConfigDict(extra="ignore")

    root_key: ClassVar[str] = ""

    @classmethod
    def from_payload(cls, payload: Any, model: str | None = None) -> dict[str, Any]:
        """
        Extract permitted attributes from a request body

        Args:
            payload: Decoded JSON body
            model: Human model name used in error reporting

        Returns:
            Only the attributes the client actually sent

        Raises:
            RecordInvalid: If the body is not an object or a field has the wrong type
        """
        if isinstance(payload, dict) and isinstance(payload.get(cls.root_key), dict):
            payload = payload[cls.root_key]
        if not isinstance(payload, dict):
            raise RecordInvalid({"base": ["must be a JSON object"]}, model=model)

        try:
            params = cls.model_validate(payload)
        except ValidationError as e:
            errors: dict[str, list[str]] = {}
            for error in e.errors():
                name = str(error["loc"][0]) if error["loc"] else "base"
                errors.setdefault(name, []).append("is invalid")
            raise RecordInvalid(errors, model=model) from e

        return params.model_dump(exclude_unset=True)
