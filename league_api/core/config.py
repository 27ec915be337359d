"""Application configuration"""

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_prefix="LEAGUE_API__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Environment
    environment: str = "development"
    port: int = 3000

    # Database
    db_url: str = "sqlite:///data/league.db"

    # Redis
    redis_url: str = "redis://localhost:6379/2"

    # JWT Settings
    jwt_issuer: str = "https://league.local"
    jwt_audience: str = "league-api"
    access_token_lifetime: int = 7200  # 2 hours
    refresh_token_lifetime: int = 2592000  # 30 days
    authorization_code_lifetime: int = 600  # 10 minutes

    # RSA Keys
    private_key_path: str = "keys/private_key.pem"
    public_key_path: str = "keys/public_key.pem"

    # OAuth scopes
    default_scopes: str = "read"
    optional_scopes: str = "write admin"
    enforce_scopes: bool = True
    allow_open_application_registration: bool = False

    # Users
    password_min_length: int = 6
    bcrypt_rounds: int = 12
    max_per_page: int = 100

    # Seed data
    admin_email: str = "admin@league.local"
    admin_password: str | None = None

    # Security
    enable_brute_force_protection: bool = True
    brute_force_threshold: int = 5  # failed attempts
    brute_force_lockout_duration: int = 900  # 15 minutes in seconds

    # Logging
    log_level: str = "INFO"

    # Version
    version: str = "0.1.0"

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.environment.lower() == "development"

    @property
    def server_scopes(self) -> list[str]:
        """All scopes known to the server, default scopes first"""
        scopes = self.default_scopes.split()
        return scopes + [s for s in self.optional_scopes.split() if s not in scopes]


# Create settings instance
settings = Settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger("league-api")
