"""
Configuration Management for QC Buddy.

Configuration is a hierarchy of dataclasses that map to a YAML file, with
environment variable expansion for secrets and deployment-specific values.

Public API
----------
    from qcbuddy.core.config import Config, load_config
    from qcbuddy.core.config import LLMConfig, RetrievalConfig

Architecture
------------
    config/
    ├── base.py          # ProjectConfig, IngestConfig, KnowledgeConfig
    ├── retrieval.py     # RetrievalConfig, RankingWeights
    ├── llm.py           # LLMConfig
    ├── api.py           # APIConfig
    └── config.py        # Main Config class
"""

from qcbuddy.core.config.api import APIConfig
from qcbuddy.core.config.base import IngestConfig, KnowledgeConfig, ProjectConfig
from qcbuddy.core.config.config import Config
from qcbuddy.core.config.llm import LLMConfig
from qcbuddy.core.config.retrieval import RankingWeights, RetrievalConfig
from qcbuddy.core.config_loaders import expand_env_vars, load_config, save_config

__all__ = [
    "Config",
    "ProjectConfig",
    "IngestConfig",
    "KnowledgeConfig",
    "RetrievalConfig",
    "RankingWeights",
    "LLMConfig",
    "APIConfig",
    "load_config",
    "save_config",
    "expand_env_vars",
]
