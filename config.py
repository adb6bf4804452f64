"""Configuration settings for the Topic Universe planner."""

# Load .env into os.environ so provider fallbacks (e.g. ANTHROPIC_API_KEY) work
try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass

from pydantic_settings import BaseSettings
from pydantic import Field
from pathlib import Path


class Settings(BaseSettings):
    """Global settings for the planner.

    Settings can be overridden via environment variables with UNIVERSE_PLANNER_ prefix.
    Example: UNIVERSE_PLANNER_DEFAULT_COST_PROFILE=minimal
    """

    # Reasoning source
    default_provider: str = Field(
        default="anthropic",
        description="Provider used when --provider is not given"
    )
    default_model: str = Field(
        default="",
        description="Model override; empty uses the provider's default model"
    )
    max_tokens_per_call: int = Field(
        default=4096,
        description="Maximum tokens per reasoning call"
    )
    api_timeout_seconds: int = Field(
        default=120,
        description="API call timeout in seconds"
    )

    # Discovery defaults
    default_cost_profile: str = Field(
        default="BALANCED",
        description="Cost profile used when none is given"
    )
    default_confidence_threshold: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Autonomous accept threshold; 0 uses the cost profile's threshold"
    )

    # Paths
    universes_dir: str = Field(
        default="./universes",
        description="Directory where finished topic universes are saved"
    )

    # Search grounding
    wikidata_api_url: str = Field(
        default="https://www.wikidata.org/w/api.php",
        description="Wikidata API endpoint (primary validation source)"
    )
    wikipedia_api_url: str = Field(
        default="https://en.wikipedia.org/w/api.php",
        description="Wikipedia API endpoint (fallback validation source)"
    )
    search_timeout_seconds: float = Field(
        default=10.0,
        description="Timeout for a single search request"
    )
    search_user_agent: str = Field(
        default="universe-planner/0.1 (topic discovery)",
        description="User-Agent sent to the Wikimedia APIs"
    )
    search_result_limit: int = Field(
        default=5,
        ge=1,
        description="Hits examined per validation lookup"
    )

    # API keys (env: UNIVERSE_PLANNER_<KEY> or the provider's standard env var)
    anthropic_api_key: str = Field(
        default="",
        description="Anthropic API key for Claude (env: UNIVERSE_PLANNER_ANTHROPIC_API_KEY)",
    )
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key (env: UNIVERSE_PLANNER_OPENAI_API_KEY)",
    )
    google_api_key: str = Field(
        default="",
        description="Google/Gemini API key (env: UNIVERSE_PLANNER_GOOGLE_API_KEY)",
    )
    deepseek_api_key: str = Field(
        default="",
        description="Deepseek API key (env: UNIVERSE_PLANNER_DEEPSEEK_API_KEY)",
    )
    ollama_api_base: str = Field(
        default="http://localhost:11434",
        description="Base URL of a local Ollama server (used through LiteLLM)",
    )

    model_config = {
        "env_prefix": "UNIVERSE_PLANNER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",  # ignore extra env vars (e.g. OPENAI_API_KEY) not in schema
    }

    def get_universes_path(self) -> Path:
        """Get universes directory as Path object."""
        return Path(self.universes_dir)


# Create singleton instance
settings = Settings()
