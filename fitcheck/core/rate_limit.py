from slowapi import Limiter
from slowapi.util import get_remote_address

# Shared limiter for the AI-backed endpoints (keyed by client IP)
limiter = Limiter(key_func=get_remote_address)
