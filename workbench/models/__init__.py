from .config import ConfigResponse, HealthResponse

__all__ = ["ConfigResponse", "HealthResponse"]
