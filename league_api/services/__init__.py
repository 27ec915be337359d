"""Service modules"""

from league_api.services.access_grant_service import access_grant_service
from league_api.services.access_token_service import access_token_service
from league_api.services.auth_service import auth_service
from league_api.services.brute_force_protection import brute_force_protection
from league_api.services.oauth_application_service import oauth_application_service
from league_api.services.token_service import token_service
from league_api.services.user_service import user_service

__all__ = [
    "token_service",
    "user_service",
    "oauth_application_service",
    "access_token_service",
    "access_grant_service",
    "auth_service",
    "brute_force_protection",
]
