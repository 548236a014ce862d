"""
Configuration module for the chat streaming service.

Exports the configuration models and loader functions.
"""

from .defaults import DEFAULT_MODEL
from .loader import get_config, load_config, load_config_file, merge_configs, strip_jsonc_comments
from .main_config import Config
from .pricing_config import ModelPriceConfig, PricingConfig
from .search_config import SearchConfig

__all__ = [
    # Constants
    "DEFAULT_MODEL",
    # Config models
    "Config",
    "PricingConfig",
    "ModelPriceConfig",
    "SearchConfig",
    # Loader functions
    "load_config",
    "get_config",
    "load_config_file",
    "merge_configs",
    "strip_jsonc_comments",
]
