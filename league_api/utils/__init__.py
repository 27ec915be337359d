"""Utility modules"""

from league_api.utils.crypto import (
    digest_token,
    generate_secret,
    generate_uid,
    hash_password,
    verify_password,
)
from league_api.utils.validators import Check, ValidationContext, ValidationPipeline, merge_errors

__all__ = [
    "hash_password",
    "verify_password",
    "digest_token",
    "generate_uid",
    "generate_secret",
    "Check",
    "ValidationContext",
    "ValidationPipeline",
    "merge_errors",
]
