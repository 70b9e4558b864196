"""Process-level context handed to every feature.

Built once at start-up. If the generation service cannot be constructed
(missing key, client error) the failure is kept and returned from every
``require_generation()`` call instead of being raised per request.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from gemini_companion.client.generation import GeminiGenerationService, GenerationService
from gemini_companion.config import FrozenConfig, resolve_config
from gemini_companion.core.types import Failure, Result, Success
from gemini_companion.exceptions import ConfigurationError
from gemini_companion.state.store import JSONFileStore, MemoryStore, PersistentStore
from gemini_companion.telemetry import TelemetryContext, TelemetryContextProtocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompanionContext:
    config: FrozenConfig
    service: GenerationService | None
    initialization_error: ConfigurationError | None
    store: PersistentStore
    telemetry: TelemetryContextProtocol

    @classmethod
    def create(
        cls,
        config: FrozenConfig | None = None,
        *,
        service: GenerationService | None = None,
        store: PersistentStore | None = None,
        telemetry: TelemetryContextProtocol | None = None,
    ) -> CompanionContext:
        """Resolve configuration and construct the generation service once."""
        config = config or resolve_config()
        tele = telemetry or TelemetryContext()
        error: ConfigurationError | None = None

        if service is None:
            try:
                service = GeminiGenerationService(
                    config.api_key,
                    config.model,
                    safety_threshold=config.safety_threshold,
                    telemetry=tele,
                )
            except ConfigurationError as e:
                error = e
            except Exception as e:
                error = ConfigurationError(f"The generation client could not be initialized: {e}")
                error.__cause__ = e
            if error is not None:
                service = None
                logger.error("Generation service unavailable: %s", error.message)

        if store is None:
            store = (
                JSONFileStore(config.library_path)
                if config.library_path is not None
                else MemoryStore()
            )

        return cls(
            config=config,
            service=service,
            initialization_error=error,
            store=store,
            telemetry=tele,
        )

    @property
    def ready(self) -> bool:
        return self.service is not None

    def require_generation(self) -> Result[GenerationService, ConfigurationError]:
        if self.service is None:
            return Failure(self.initialization_error or ConfigurationError())
        return Success(self.service)
