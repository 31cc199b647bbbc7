"""
Main configuration class for QC Buddy.

This module provides the Config dataclass that aggregates all sub-configs
and handles validation, path management, and YAML parsing.

Architecture Context
--------------------
The Config object is created once at startup and passed to the components
that need settings:

    config.yaml / qcbuddy.yaml
           ↓
    load_config() → Config object
           ↓
    Passed to: IngestionPipeline, KnowledgeStore, AnswerService, GeminiClient

Configuration Hierarchy
-----------------------
    Config
    ├── ProjectConfig      # Raw and knowledge directories
    ├── IngestConfig       # Chunking mode and caps
    ├── KnowledgeConfig    # Candidate directories, rule-like preference
    ├── RetrievalConfig    # top-k, source limits, ranking weights
    ├── LLMConfig          # Gemini key, mode, models, retries, cache
    └── APIConfig          # Server host/port, AI call budget

Environment Variables
---------------------
Secrets use ${VAR_NAME} syntax in YAML:

    llm:
      api_key: ${GEMINI_KEY}
      mode: ${GEMINI_MODE:flash}

Usage Example
-------------
    config = load_config()
    cap = config.ingest.max_chars("full")
    dirs = config.knowledge_paths
"""

from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

from qcbuddy.core.config.api import APIConfig
from qcbuddy.core.config.base import IngestConfig, KnowledgeConfig, ProjectConfig
from qcbuddy.core.config.llm import LLMConfig
from qcbuddy.core.config.retrieval import RankingWeights, RetrievalConfig

_VALID_INGEST_MODES = {"smart", "full"}
_VALID_LLM_MODES = {"flash", "pro", "off"}


@dataclass
class Config:
    """Main QC Buddy configuration."""

    project: ProjectConfig = field(default_factory=ProjectConfig)
    ingest: IngestConfig = field(default_factory=IngestConfig)
    knowledge: KnowledgeConfig = field(default_factory=KnowledgeConfig)
    retrieval: RetrievalConfig = field(default_factory=RetrievalConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    api: APIConfig = field(default_factory=APIConfig)

    # Runtime paths (set after loading)
    _base_path: Path = field(default_factory=Path.cwd, repr=False)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.ingest.mode.lower() not in _VALID_INGEST_MODES:
            raise ValueError(
                f"ingest.mode must be one of {sorted(_VALID_INGEST_MODES)}, "
                f"got: {self.ingest.mode}"
            )
        self.ingest.mode = self.ingest.mode.lower()

        if self.ingest.max_chars_smart <= 0 or self.ingest.max_chars_full <= 0:
            raise ValueError("ingest chunk caps must be positive")

        if self.llm.mode.lower() not in _VALID_LLM_MODES:
            raise ValueError(
                f"llm.mode must be one of {sorted(_VALID_LLM_MODES)}, "
                f"got: {self.llm.mode}"
            )
        self.llm.mode = self.llm.mode.lower()

        if self.retrieval.max_sources < 1 or self.retrieval.top_k < 1:
            raise ValueError("retrieval.top_k and retrieval.max_sources must be >= 1")

    @property
    def base_path(self) -> Path:
        """Directory relative paths are resolved against."""
        return self._base_path

    @property
    def raw_path(self) -> Path:
        """Get absolute path to the raw documents directory."""
        return self._resolve(self.project.raw_dir)

    @property
    def knowledge_path(self) -> Path:
        """Get absolute path to the generated knowledge directory."""
        return self._resolve(self.project.knowledge_dir)

    @property
    def knowledge_paths(self) -> List[Path]:
        """Candidate knowledge directories in scan order.

        The ingestion output directory is always scanned, last if it is not
        one of the configured candidates.
        """
        paths = [self._resolve(d) for d in self.knowledge.candidate_dirs]
        if self.knowledge_path not in paths:
            paths.append(self.knowledge_path)
        return paths

    def _resolve(self, path: str) -> Path:
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self._base_path / candidate

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        result: dict[str, Any] = {}
        for key, value in asdict(self).items():
            if key.startswith("_"):
                continue
            result[key] = value
        return result

    @staticmethod
    def _filter_fields(cls_type: Any, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Filter dict to only keys that match dataclass fields, handling None."""
        if not data:
            return {}
        valid_keys = {f.name for f in fields(cls_type)}
        return {k: v for k, v in data.items() if k in valid_keys}

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], base_path: Optional[Path] = None
    ) -> "Config":
        """Create Config from dictionary."""
        # Import here to avoid circular dependency
        from qcbuddy.core.config_loaders import expand_env_vars

        data = expand_env_vars(data or {})

        config = cls(
            project=ProjectConfig(
                **cls._filter_fields(ProjectConfig, data.get("project"))
            ),
            ingest=IngestConfig(**cls._filter_fields(IngestConfig, data.get("ingest"))),
            knowledge=KnowledgeConfig(
                **cls._filter_fields(KnowledgeConfig, data.get("knowledge"))
            ),
            retrieval=cls._parse_retrieval_config(data),
            llm=cls._parse_llm_config(data),
            api=APIConfig(**cls._filter_fields(APIConfig, data.get("api"))),
        )

        if base_path:
            config._base_path = base_path

        return config

    @classmethod
    def _parse_retrieval_config(cls, data: Dict[str, Any]) -> RetrievalConfig:
        """Parse retrieval config with nested ranking weights."""
        retrieval_data = dict(data.get("retrieval") or {})
        weights = RankingWeights(
            **cls._filter_fields(RankingWeights, retrieval_data.pop("weights", None))
        )
        return RetrievalConfig(
            **cls._filter_fields(RetrievalConfig, retrieval_data), weights=weights
        )

    @classmethod
    def _parse_llm_config(cls, data: Dict[str, Any]) -> LLMConfig:
        """Parse LLM config, merging user model lists over the defaults."""
        llm_data = dict(data.get("llm") or {})
        models = llm_data.pop("models", None) or {}
        config = LLMConfig(**cls._filter_fields(LLMConfig, llm_data))
        for mode, names in models.items():
            if names:
                config.models[mode] = [str(n) for n in names]
        return config
