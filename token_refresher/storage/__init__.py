from .token_store import JsonFileTokenStore, TokenStore, load_record

__all__ = ["JsonFileTokenStore", "TokenStore", "load_record"]
