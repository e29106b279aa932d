from __future__ import annotations

import re

from token_refresher.errors import OTPNotFoundError

OTP_PATTERN = re.compile(r"\d{6}", re.ASCII)


def extract_otp(text: str) -> str:
    """Return the leftmost run of six digits in ``text``.

    Plain regex semantics: a seven digit run yields its first six digits,
    anything shorter than six digits never matches.
    """
    match = OTP_PATTERN.search(text or "")
    if not match:
        raise OTPNotFoundError("OTP code not found in email")
    return match.group(0)


__all__ = ["OTP_PATTERN", "extract_otp"]
