"""Settings for the envbind CLI itself.

Priority chain (highest to lowest):
  1. Init kwargs  : CLI flags passed by Click (only flags that are set)
  2. Env vars     : ``ENVBIND_*`` prefix
  3. Code defaults

Uses Pydantic Settings v2. These settings only shape the tool's output;
records being checked are bound by :mod:`envbind.services.binder`.
"""

from __future__ import annotations

from typing import Any

from pydantic_settings import BaseSettings


class EnvbindSettings(BaseSettings):
    """Output and logging settings, frozen after construction.

    Stored on the :class:`~envbind.commands._context.AppContext` at the CLI
    root level.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "ENVBIND_",
    }

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    @classmethod
    def from_cli(cls, **cli_flags: Any) -> EnvbindSettings:
        """Construct settings from a CLI invocation.

        Unset flags (``False`` or ``None``) are dropped so that an
        ``ENVBIND_*`` variable can still enable them.
        """
        return cls(**{key: value for key, value in cli_flags.items() if value})
