"""VerdictQ - purchase verdicts and receipt-email processing"""

from __future__ import annotations

__version__ = "0.1.0"
