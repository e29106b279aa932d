"""GameHub token refresher.

Renews the GameHub login token through the email OTP flow and serves it to
internal workers.
"""

__version__ = "1.0.0"
