"""Configuration for the GitHub backend."""

from pydantic import BaseModel, Field, SecretStr


class GitHubConfig(BaseModel):
    """Configuration for the GitHub backend."""

    token: SecretStr
    api_base_url: str = "https://api.github.com"
    api_version: str = "2022-11-28"
    per_page: int = Field(default=100, ge=1, le=100)
