from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from .config import ConfigStore
from .environment import EnvironmentCapabilities, probe_environment, raw_system_locale, resolve_locale


@dataclass(frozen=True)
class AppContext:
    """Startup wiring shared by the rest of the application."""

    config: ConfigStore
    env: EnvironmentCapabilities

    @property
    def attachment_extensions(self) -> list[str]:
        return list(self.config.get("attachmentExtensions") or [])


def bootstrap(
    home_dir: Path | None = None,
    *,
    raw_locale: str | None = None,
    warnings: list[dict[str, Any]] | None = None,
    probe: Callable[..., EnvironmentCapabilities] = probe_environment,
) -> AppContext:
    """Load the config, sweep stale startup paths and probe the environment once."""

    locale = resolve_locale(raw_locale if raw_locale is not None else raw_system_locale())
    config = ConfigStore(home_dir, locale=locale, warnings=warnings)
    env = probe(config, locale=locale)
    return AppContext(config=config, env=env)
