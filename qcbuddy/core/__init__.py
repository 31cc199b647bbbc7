"""
Core infrastructure for QC Buddy.

- config: dataclass configuration, YAML loading, environment overrides
- models: markets, topics, chunks and other shared value types
- exceptions: error hierarchy with codes and fix hints
- logging: structured rich logging
- retry: backoff decorator used by the generation client
"""
