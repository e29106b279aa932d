from .client import GameHubClient, timestamp_ms
from .signing import build_sign_string, generate_signature

__all__ = ["GameHubClient", "build_sign_string", "generate_signature", "timestamp_ms"]
