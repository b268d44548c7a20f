"""Configuration module for the Reminder Extraction Engine.

This module handles all application configuration using pydantic-settings.
Values come from environment variables and an optional .env file.
"""

import logging
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
from pydantic import Field

# Explicitly load .env file BEFORE BaseSettings reads environment variables
load_dotenv()

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    """Application settings class.

    This class defines all configuration settings for the application.
    Settings are loaded from environment variables with appropriate defaults.
    """

    # Application settings
    environment: str = "development"
    debug: bool = False
    log_level: str = Field(default="INFO", description="Root log level (DEBUG, INFO, WARNING, ...).")

    # LLM provider selection
    llm_provider: str = Field(default="openai", description="LLM provider ('openai', 'groq' or 'ollama')")

    # OpenAI
    openai_api_key: Optional[str] = Field(default=None, description="API Key for OpenAI")
    openai_model: str = Field(default="gpt-4o-mini", description="OpenAI chat model used for extraction")

    # Groq (OpenAI-compatible HTTP API)
    groq_api_key: Optional[str] = Field(default=None, description="API Key for Groq")
    groq_model: str = Field(default="llama-3.1-8b-instant", description="Groq chat model used for extraction")
    groq_base_url: str = Field(default="https://api.groq.com/openai/v1", description="Base URL of the Groq API.")

    # Ollama
    ollama_base_url: str = Field(default="http://localhost:11434", description="Base URL for the Ollama API server.")
    default_model: str = Field(default="llama3.1:latest", description="Default Ollama model to use.")

    # Request parameters
    llm_temperature: float = Field(default=0.2, description="Sampling temperature for extraction requests.")
    llm_max_tokens: int = Field(default=1000, description="Maximum tokens in an extraction completion.")
    request_timeout: float = Field(default=60.0, description="HTTP timeout in seconds for provider requests.")

    # --- Feature: Reminder Extraction ---
    min_source_chars: int = Field(
        default=20,
        description="Source texts shorter than this (after stripping) are rejected as unreadable."
    )
    currency_symbol: str = Field(default="$", description="Symbol prefixed to amounts that carry none.")

    # API Server Configuration (for uvicorn)
    api_host: str = Field(default="0.0.0.0", description="Host for the FastAPI server.")
    api_port: int = Field(default=8000, description="Port for the FastAPI server.")
    api_reload: bool = Field(default=False, description="Enable auto-reload for the FastAPI server (development).")
    api_log_level: str = Field(default="info", description="Log level for the FastAPI server.")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra='ignore'
    )

def get_settings() -> Settings:
    """Get the application settings instance.

    Returns:
        Settings: Settings loaded from environment variables and .env.
    """
    return Settings()
