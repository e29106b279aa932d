from .client import MESSAGES_COLLECTION_KEY, MailboxClient
from .otp import OTP_PATTERN, extract_otp

__all__ = ["MESSAGES_COLLECTION_KEY", "MailboxClient", "OTP_PATTERN", "extract_otp"]
