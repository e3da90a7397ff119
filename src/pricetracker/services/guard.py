from typing import Optional


def authorize(provided_key: Optional[str], configured_secret: str) -> bool:
    """Shared-secret check. An unset secret rejects every key."""
    if not configured_secret or not provided_key:
        return False
    return provided_key == configured_secret
