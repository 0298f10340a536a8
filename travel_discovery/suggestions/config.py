from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PipelineConfig:
    suggestion_count: int = 4
    cache_enabled: bool = True
    cache_ttl_seconds: float = 300.0  # 5 minutes


DEFAULT_PIPELINE_CONFIG = PipelineConfig()
