"""Configuration management for SteamAffinity."""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings."""
    
    # Steam endpoints
    steam_store_url: str = Field("https://store.steampowered.com", description="Steam store base URL")
    steam_community_url: str = Field("https://steamcommunity.com", description="Steam community base URL")
    user_agent: str = Field(
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        description="User agent sent with every request"
    )
    request_timeout: float = Field(15.0, description="Per-request timeout in seconds")
    
    # Retries
    max_retries: int = Field(3, description="Maximum attempts per request")
    retry_delay: float = Field(1.0, description="Backoff step in seconds (multiplied by attempt number)")
    
    # Pacing
    page_delay: float = Field(0.2, description="Pause between profile pages in seconds")
    discovery_delay: float = Field(0.5, description="Pause between review feed batches in seconds")
    batch_cooldown: float = Field(1.0, description="Cooldown after every batch of reviewers in seconds")
    cooldown_every: int = Field(10, description="Number of reviewers per cooldown batch")
    
    # Limits
    max_pages: int = Field(50, description="Hard ceiling on pages fetched per profile")
    last_page_threshold: int = Field(10, description="A page with fewer reviews than this is the last one")
    feed_page_size: int = Field(100, description="Reviews requested per review feed call")
    lookback_window: int = Field(2000, description="Characters scanned backwards for a game link")
    
    # Analysis defaults
    default_min_overlap: int = Field(3, description="Default minimum shared games")
    default_min_similarity: int = Field(60, description="Default minimum agreement percentage")
    default_max_profiles: int = Field(100, description="Default number of reviewers to scan")
    
    # Logging
    log_level: str = Field("INFO", description="Logging level")
    activity_log_enabled: bool = Field(True, description="Record narration in the observable activity log")
    
    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


# Global settings instance
settings = Settings()
