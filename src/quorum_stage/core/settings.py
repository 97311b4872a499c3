"""Application settings and configuration.

This module defines all configuration options for the Quorum Stage application.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Quorum Stage", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")

    # Database configuration
    database_url: str = Field(default="sqlite:///./quorum.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")
    auto_create_tables: bool = Field(default=False, alias="AUTO_CREATE_TABLES")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )

    # Reputation weights applied to content authors
    reputation_question_upvote: int = Field(default=5, alias="REPUTATION_QUESTION_UPVOTE")
    reputation_answer_upvote: int = Field(default=10, alias="REPUTATION_ANSWER_UPVOTE")
    reputation_downvote_received: int = Field(default=-2, alias="REPUTATION_DOWNVOTE_RECEIVED")
    reputation_answer_accepted: int = Field(default=15, alias="REPUTATION_ANSWER_ACCEPTED")

    # Leaderboard windows (days) and pagination bounds
    leaderboard_week_days: int = Field(default=7, alias="LEADERBOARD_WEEK_DAYS")
    leaderboard_month_days: int = Field(default=30, alias="LEADERBOARD_MONTH_DAYS")
    leaderboard_max_limit: int = Field(default=100, alias="LEADERBOARD_MAX_LIMIT")
    default_page_size: int = Field(default=10, alias="DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(default=100, alias="MAX_PAGE_SIZE")
    max_question_tags: int = Field(default=5, alias="MAX_QUESTION_TAGS")

    # Text generation service used for plain-language explanations
    text_generation_enabled: bool = Field(default=False, alias="TEXT_GENERATION_ENABLED")
    text_generation_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="TEXT_GENERATION_BASE_URL",
    )
    text_generation_model: str = Field(default="gemini-2.0-flash", alias="TEXT_GENERATION_MODEL")
    text_generation_api_key: str | None = Field(default=None, alias="GEMINI_API_KEY")
    text_generation_timeout_seconds: float = Field(
        default=20.0,
        alias="TEXT_GENERATION_TIMEOUT_SECONDS",
    )

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides.

        Returns:
            The active database URL (test database if in testing mode, otherwise production)
        """
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def vote_rewards(self) -> dict[str, dict[int, int]]:
        """Reputation value of each vote direction, keyed by content type."""
        return {
            "question": {1: self.reputation_question_upvote, -1: self.reputation_downvote_received},
            "answer": {1: self.reputation_answer_upvote, -1: self.reputation_downvote_received},
        }


settings = Settings()  # type: ignore[call-arg]
