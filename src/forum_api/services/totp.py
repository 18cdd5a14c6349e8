"""Time-based one-time code verification for the second factor."""

import binascii
import re
from datetime import datetime

import pyotp

# Exactly six ASCII digits; str.isdigit() would also accept other Unicode digits
_CODE_PATTERN = re.compile(r"[0-9]{6}")


def is_well_formed_code(code: str) -> bool:
    """Check that a submitted code is exactly six numeric digits."""
    return _CODE_PATTERN.fullmatch(code) is not None


class SecondFactorVerifier:
    """Verifies 6-digit TOTP codes against a user's base32 shared secret."""

    def __init__(self, interval: int = 30, valid_window: int = 1) -> None:
        """Initialize the verifier.

        Args:
            interval: Length of one time step in seconds.
            valid_window: Number of time steps of clock skew tolerated on
                either side of the current one.
        """
        self.interval = interval
        self.valid_window = valid_window

    def verify(self, secret: str | None, code: str, for_time: datetime | None = None) -> bool:
        """Return True if the code is valid for the secret at for_time (default: now).

        Malformed codes are rejected without looking at the secret. An empty
        or absent secret never verifies.
        """
        if not is_well_formed_code(code):
            return False
        if not secret:
            return False

        totp = pyotp.TOTP(secret, interval=self.interval)
        try:
            return totp.verify(code, for_time=for_time, valid_window=self.valid_window)
        except (binascii.Error, ValueError):
            # Secret is not valid base32
            return False
