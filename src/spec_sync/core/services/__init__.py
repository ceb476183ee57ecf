"""Orchestration services (resolve, transform, sync, poll, generate)."""
