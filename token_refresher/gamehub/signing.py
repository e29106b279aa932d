from __future__ import annotations

import hashlib
from typing import Mapping


def build_sign_string(params: Mapping[str, str], secret_key: str) -> str:
    # 按键名排序拼接，不做 URL 编码，服务端会按同样规则重算
    param_string = "&".join(f"{key}={params[key]}" for key in sorted(params))
    return f"{param_string}&{secret_key}"


def generate_signature(params: Mapping[str, str], secret_key: str) -> str:
    sign_string = build_sign_string(params, secret_key)
    return hashlib.md5(sign_string.encode("utf-8")).hexdigest().lower()


__all__ = ["build_sign_string", "generate_signature"]
