"""Configuration resolution.

Precedence: programmatic overrides > environment (optionally seeded from a
``.env`` file) > defaults.
"""

from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .schema import CompanionSettings
from .types import FrozenConfig


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    env_file: str | Path | None = None,
) -> FrozenConfig:
    """Resolve configuration from all sources.

    Args:
        programmatic: Field overrides; unknown keys are ignored.
        env_file: Optional ``.env`` file loaded before reading the
            environment. Existing environment variables are not overridden.

    Raises:
        FileNotFoundError: ``env_file`` was given but does not exist.
        ValueError: A value failed validation.
    """
    if env_file is not None:
        env_path = Path(env_file)
        if not env_path.exists():
            raise FileNotFoundError(f"Environment file not found: {env_path}")
        load_dotenv(env_path, override=False)

    overrides = {
        k: v
        for k, v in (programmatic or {}).items()
        if k in CompanionSettings.model_fields and v is not None
    }
    settings = CompanionSettings(**overrides)
    return FrozenConfig(**settings.model_dump())


__all__ = ["CompanionSettings", "FrozenConfig", "resolve_config"]
