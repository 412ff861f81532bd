"""Rate limiting middleware using SlowAPI."""
from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address)

TRIAGE_RATE_LIMIT = "30/minute"
DIAGNOSE_RATE_LIMIT = "30/minute"
HEALTH_RATE_LIMIT = "200/minute"
