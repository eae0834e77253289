from functools import lru_cache
from pathlib import Path
from typing import List, Literal, Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Centralized application settings leveraging environment overrides.
    """

    app_name: str = "newsdigest"
    environment: str = Field("local", validation_alias="ENVIRONMENT")
    log_level: str = Field("INFO", description="Root logging level")
    allow_origins: List[str] = Field(default_factory=lambda: ["*"])
    max_upload_bytes: int = Field(15 * 1024 * 1024, ge=1024)  # 15 MB documents
    max_payload_bytes: int = Field(2 * 1024 * 1024, ge=1024)

    # Summarization strategy
    summarizer_engine: Literal["extractive", "remote"] = Field(
        "extractive", description="Default summarization strategy"
    )
    remote_fallback_to_extractive: bool = Field(
        True, description="Fallback to the extractive engine when the remote backend is down"
    )
    extractive_sentence_threshold: int = Field(3, ge=3, le=4)
    remote_summary_backend: Literal["huggingface", "llm"] = "huggingface"
    remote_max_words: int = Field(500, ge=1, le=4000)
    remote_max_passes: int = Field(3, ge=1, le=10)
    remote_chunk_concurrency: int = Field(1, ge=1, le=16)
    remote_timeout_seconds: float = Field(60.0, gt=0, le=600)

    # Hugging Face inference
    huggingface_api_key: Optional[str] = Field(
        None, validation_alias=AliasChoices("HUGGINGFACE_API_KEY", "HF_TOKEN")
    )
    huggingface_api_url: str = "https://router.huggingface.co/hf-inference/models"
    huggingface_summary_model: str = "facebook/bart-large-cnn"
    summary_min_length: int = Field(30, ge=1)
    summary_max_length: int = Field(150, ge=10)

    # Source extraction
    http_timeout_seconds: float = Field(15.0, gt=0, le=120)
    http_user_agent: str = "newsdigest/1.0 (+https://example.com) python-httpx"
    web_renderer: Literal["http", "browser"] = "http"
    browser_timeout_ms: int = Field(15000, ge=1000, le=120000)
    youtube_api_key: Optional[str] = Field(None, validation_alias="YOUTUBE_API_KEY")
    youtube_api_url: str = "https://www.googleapis.com/youtube/v3/videos"

    # LLM settings
    llm_provider: str = Field("openai", description="LLM provider: none, openai, anthropic, ollama")
    llm_model: Optional[str] = Field(None, description="Model name for LLM provider")
    openai_api_key: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "HUGGINGFACE_API_KEY", "HF_TOKEN"),
    )
    openai_base_url: Optional[str] = "https://router.huggingface.co/v1"
    anthropic_api_key: Optional[str] = Field(None, validation_alias="ANTHROPIC_API_KEY")
    ollama_base_url: str = "http://localhost:11434"
    llm_max_tokens: int = Field(500, ge=50, le=4000)
    llm_temperature: float = Field(0.3, ge=0.0, le=2.0)

    # Trust classification
    trust_classifier_mode: Literal["heuristic", "remote"] = "heuristic"
    trusted_sources_path: Optional[Path] = None
    trust_min_words: int = Field(20, ge=1)
    trust_reasoning_max_chars: int = Field(280, ge=20, le=2000)

    class Config:
        env_file = ".env"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
