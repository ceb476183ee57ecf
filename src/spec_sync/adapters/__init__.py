"""Adapters: concrete I/O (Postman REST API, JSON files)."""
