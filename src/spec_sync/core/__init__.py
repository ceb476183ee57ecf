"""Core: domain, contracts and orchestration. No direct HTTP or filesystem access."""
