"""Guard policy: tag rules, language heuristic and file selection."""

from .loader import REPO_CONFIG_NAME, GuardConfig, default_config, load_config

__all__ = ["GuardConfig", "REPO_CONFIG_NAME", "default_config", "load_config"]
