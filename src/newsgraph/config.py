"""Configuration management using Pydantic Settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Neo4j Configuration
    neo4j_uri: str = "bolt://localhost:7687"
    neo4j_user: str = "neo4j"
    neo4j_password: str = "newsgraph_password"
    neo4j_database: str = "neo4j"

    # Query limits
    initial_article_limit: int = Field(
        default=30,
        description="Most recent articles loaded when the session starts"
    )
    expansion_article_limit: int = Field(
        default=10,
        description="Articles fetched per tag expansion"
    )

    # Rendering
    label_font_size: float = Field(
        default=12.0,
        description="Apparent label size in device pixels (divided by zoom in world units)"
    )
    label_padding_ratio: float = Field(
        default=0.2,
        description="Label background padding as a fraction of the font size"
    )
    label_background: tuple[int, int, int, int] = (255, 255, 255, 204)
    tag_label_color: str = "red"
    article_label_color: str = "black"
    avatar_size: float = Field(
        default=12.0,
        description="Submitter glyph edge length in world units"
    )
    link_color: str = "#999999"
    background_color: str = "white"

    # Default viewport
    viewport_width: int = 1280
    viewport_height: int = 800
    viewport_zoom: float = 1.0

    # Avatar fetching
    avatar_base_url: str = Field(
        default="https://lobste.rs",
        description="Base URL for relative avatar paths stored on users"
    )
    avatar_timeout: float = 5.0

    # Layout
    layout_seed: int = 42
    layout_spacing: float = 40.0

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False


def get_dev_settings() -> Settings:
    """Get development environment settings."""
    return Settings(
        neo4j_password="password",
        api_debug=True,
    )


def get_test_settings() -> Settings:
    """Get test environment settings."""
    return Settings(
        neo4j_database="neo4j_test",
        avatar_base_url="http://avatars.test",
        viewport_width=400,
        viewport_height=300,
    )


# Global settings instance
settings = Settings()
