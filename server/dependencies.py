"""FastAPI dependencies for configuration and orchestrator access."""

from config.config import Config


def get_config() -> Config:
    """Dependency to get the process-wide configuration (singleton pattern)."""
    if not hasattr(get_config, "_instance"):
        get_config._instance = Config()
    return get_config._instance


def get_orchestrator():
    """
    Dependency to get orchestrator instance (singleton pattern).

    Raises:
        OracleUnavailable: The oracle is not configured
    """
    from orchestrator.factory import create_orchestrator_from_env

    if not hasattr(get_orchestrator, "_instance"):
        get_orchestrator._instance = create_orchestrator_from_env(get_config())
    return get_orchestrator._instance
