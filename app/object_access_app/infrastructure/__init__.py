from object_access_app.infrastructure.logging import setup_app_logging

__all__ = ["setup_app_logging"]
