"""ID generation utility."""

import secrets


def gen_id(prefix: str) -> str:
    """Generate prefixed IDs: msg_xxx, call_xxx"""
    return f"{prefix}{secrets.token_urlsafe(12)}"
