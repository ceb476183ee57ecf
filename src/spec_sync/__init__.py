"""postman-spec-sync: keep a Postman Spec (and its Collection) in sync with a local OpenAPI file."""

__version__ = "0.1.0"
