from .loader import ConfigError, NormalizerConfig, NormalizerSettings, load_config

__all__ = [
    "ConfigError",
    "NormalizerConfig",
    "NormalizerSettings",
    "load_config",
]
