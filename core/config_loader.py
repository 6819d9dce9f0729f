import yaml
import os
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field

from core.exceptions import ConfigurationError
from core.utils import get_env_number, get_env_bool, clamp_int


class DatabaseConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: Optional[str] = None


class PricingRate(BaseModel):
    """USD per 1M tokens."""
    model_config = ConfigDict(frozen=True)

    input: float
    output: float


class LlmConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    provider: str = "openai"
    api_key: Optional[str] = None
    base_url: str = "https://api.openai.com/v1"
    scoring_model: str = "gpt-4.1"
    scoring_fallback_model: Optional[str] = "gpt-4o-mini"
    temperature: float = 0.1
    max_tokens: int = 1800
    schema_retry_attempts: int = 1  # 0-2, malformed-output retries per run of the model matrix
    request_timeout_seconds: float = 60.0
    pricing_override: Optional[PricingRate] = None

    def model_candidates(self) -> List[str]:
        """Primary model first, fallback only when it differs."""
        models = [self.scoring_model]
        if self.scoring_fallback_model and self.scoring_fallback_model != self.scoring_model:
            models.append(self.scoring_fallback_model)
        return models


class ScorerConfig(BaseModel):
    """
    Configuration for the batch scorer.

    batch_size bounds how many queued postings one invocation picks up.
    """
    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    batch_size: int = 8
    default_threshold: float = 0.6
    max_evidence_lines: int = 20
    min_description_length: int = 40
    claim_postings: bool = True
    # Claims older than this are returned to the queue at the start of a run
    stale_claim_minutes: int = 30


class WebConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = 8080
    allowed_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:8080"]
    )
    rate_limit: str = "10/minute"


class TelemetryConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    endpoint: Optional[str] = None
    timeout_seconds: float = 3.0
    script_name: str = "async-ats-scorer"


class ScheduleConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    interval_seconds: int = 900


class AppConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    llm: LlmConfig = Field(default_factory=LlmConfig)
    scorer: ScorerConfig = Field(default_factory=ScorerConfig)
    web: WebConfig = Field(default_factory=WebConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    if not isinstance(data.get(name), dict):
        data[name] = {}
    return data[name]


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay environment variables onto the raw YAML dict."""
    env = os.environ

    if env.get("DATABASE_URL"):
        _section(data, 'database')['url'] = env["DATABASE_URL"]

    llm = _section(data, 'llm')
    if env.get("SATS_LLM_PROVIDER"):
        llm['provider'] = env["SATS_LLM_PROVIDER"]
    if env.get("OPENAI_API_KEY"):
        llm['api_key'] = env["OPENAI_API_KEY"]
    if env.get("OPENAI_API_BASE_URL"):
        llm['base_url'] = env["OPENAI_API_BASE_URL"]
    if env.get("OPENAI_MODEL_ATS"):
        llm['scoring_model'] = env["OPENAI_MODEL_ATS"]
    if env.get("OPENAI_MODEL_ATS_FALLBACK"):
        llm['scoring_fallback_model'] = env["OPENAI_MODEL_ATS_FALLBACK"]
    llm['temperature'] = get_env_number("OPENAI_TEMPERATURE_ATS", llm.get('temperature', 0.1))
    llm['max_tokens'] = max(
        500, int(get_env_number("OPENAI_MAX_TOKENS_ATS", llm.get('max_tokens', 1800)))
    )
    llm['schema_retry_attempts'] = clamp_int(
        get_env_number("OPENAI_SCHEMA_RETRY_ATTEMPTS_ATS", llm.get('schema_retry_attempts', 1)), 0, 2
    )

    scorer = _section(data, 'scorer')
    scorer['batch_size'] = clamp_int(
        get_env_number("ASYNC_ATS_SCORER_BATCH_JOBS", scorer.get('batch_size', 8)), 1, 50
    )
    scorer['claim_postings'] = get_env_bool("ASYNC_ATS_SCORER_CLAIM", scorer.get('claim_postings', True))
    scorer['stale_claim_minutes'] = clamp_int(
        get_env_number("ASYNC_ATS_SCORER_STALE_CLAIM_MINUTES", scorer.get('stale_claim_minutes', 30)), 1, 1440
    )

    if env.get("ALLOWED_ORIGINS"):
        origins = [o.strip() for o in env["ALLOWED_ORIGINS"].split(',')]
        _section(data, 'web')['allowed_origins'] = [o for o in origins if o]
    if env.get("WEB_HOST"):
        _section(data, 'web')['host'] = env["WEB_HOST"]
    if env.get("WEB_PORT"):
        _section(data, 'web')['port'] = int(get_env_number("WEB_PORT", 8080))

    if env.get("TELEMETRY_ENDPOINT"):
        _section(data, 'telemetry')['endpoint'] = env["TELEMETRY_ENDPOINT"]

    return data


def load_config(config_path: str = "config.yaml") -> AppConfig:
    """
    Build the immutable application config.

    The YAML file is optional; every field has a default and env vars are
    applied on top, so a bare environment is enough to run.
    """
    if not os.path.exists(config_path):
        base_dir = os.path.dirname(os.path.abspath(__file__))
        config_path = os.path.join(base_dir, "..", "config.yaml")

    data: Dict[str, Any] = {}
    if os.path.exists(config_path):
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}

    return AppConfig(**_apply_env_overrides(data))


def require_runtime_settings(config: AppConfig) -> None:
    """Fail fast before a batch starts when credentials or the store are missing."""
    missing = []
    if not config.database.url:
        missing.append("DATABASE_URL")
    if config.llm.provider == "openai" and not config.llm.api_key:
        missing.append("OPENAI_API_KEY")
    if missing:
        raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")
