"""Domain exceptions translated into error envelopes at the endpoint boundary"""


class RecordInvalid(Exception):
    """A write failed validation"""

    def __init__(self, errors: dict[str, list[str]], model: str | None = None):
        self.errors = errors
        self.model = model
        super().__init__(f"Validation failed: {self.full_messages()}")

    def full_messages(self) -> str:
        parts = []
        for field, messages in self.errors.items():
            label = field.replace("_", " ").capitalize()
            parts.extend(f"{label} {message}" for message in messages)
        return ", ".join(parts)


class RecordNotFound(Exception):
    """A lookup by identifier did not resolve"""

    def __init__(self, model: str, record_id: object | None = None):
        self.model = model
        self.record_id = record_id
        super().__init__(f"{model} not found")


class RenderError(Exception):
    """The renderer was asked to render something it cannot (programmer error)"""


class NotAuthenticated(Exception):
    """Bearer token missing, unknown, revoked or expired"""


class InsufficientScope(Exception):
    """Valid token lacking a scope the action requires"""

    def __init__(self, required: tuple[str, ...]):
        self.required = required
        super().__init__(f"Missing required scope: {' '.join(required)}")


class OAuthError(Exception):
    """RFC 6749 error raised by the token authority"""

    def __init__(self, error: str, description: str | None = None, status_code: int = 400):
        self.error = error
        self.description = description
        self.status_code = status_code
        super().__init__(description or error)
