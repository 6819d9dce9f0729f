from dataclasses import dataclass

from sqlalchemy.orm import sessionmaker

from core.config_loader import AppConfig, require_runtime_settings
from core.llm.factory import build_provider
from core.llm.interfaces import LLMProvider
from core.scorer.service import BatchScorer
from core.telemetry import TelemetrySink
from database.database import get_session_factory
from notification.service import NotificationService


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    Built once per process from the immutable AppConfig. DB access should be
    obtained via scoring_uow(session_factory) inside each batch run.
    """
    config: AppConfig
    provider: LLMProvider
    telemetry: TelemetrySink
    notification_service: NotificationService
    session_factory: sessionmaker
    scorer: BatchScorer

    @classmethod
    def build(cls, config: AppConfig) -> "AppContext":
        """Build an AppContext from config.

        Raises:
            ConfigurationError: database URL or provider credentials missing
        """
        require_runtime_settings(config)

        provider = build_provider(config.llm)
        telemetry = TelemetrySink(config.telemetry)
        notification_service = NotificationService()

        scorer = BatchScorer(
            provider=provider,
            llm_config=config.llm,
            scorer_config=config.scorer,
            notification_service=notification_service,
            telemetry=telemetry,
        )

        return cls(
            config=config,
            provider=provider,
            telemetry=telemetry,
            notification_service=notification_service,
            session_factory=get_session_factory(config.database.url),
            scorer=scorer,
        )
