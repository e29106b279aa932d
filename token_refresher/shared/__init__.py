from .http import read_json_object

__all__ = ["read_json_object"]
