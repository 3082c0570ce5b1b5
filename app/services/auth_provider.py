"""
Auth provider admin API client
Sign-in and passwords live with the hosted auth provider; the API only needs
its admin endpoint to remove auth users when an account or guide is deleted
"""

import logging

import httpx

from ..config import AUTH_PROVIDER_URL, AUTH_SERVICE_ROLE_KEY

logger = logging.getLogger(__name__)


async def delete_auth_user(user_id: str) -> bool:
    """
    Delete a user from the auth provider

    Returns:
        bool: True when the provider confirmed the deletion, False when it was
        skipped or failed. Callers treat the local deletion as authoritative.
    """
    if not AUTH_PROVIDER_URL or not AUTH_SERVICE_ROLE_KEY:
        logger.warning(
            f"⚠️ Auth provider admin API not configured, skipping auth user deletion for {user_id}"
        )
        return False

    url = f"{AUTH_PROVIDER_URL.rstrip('/')}/auth/v1/admin/users/{user_id}"
    headers = {
        "Authorization": f"Bearer {AUTH_SERVICE_ROLE_KEY}",
        "apikey": AUTH_SERVICE_ROLE_KEY,
    }

    try:
        async with httpx.AsyncClient(timeout=30.0) as http_client:
            response = await http_client.delete(url, headers=headers)
    except httpx.HTTPError as e:
        logger.error(f"❌ Auth provider request failed while deleting user {user_id}: {e}")
        return False

    if response.status_code in (200, 204):
        logger.info(f"✅ Auth user {user_id} deleted from provider")
        return True

    if response.status_code == 404:
        logger.info(f"ℹ️ Auth user {user_id} already absent at provider")
        return True

    logger.error(
        f"❌ Auth provider refused deletion of user {user_id}: {response.status_code} {response.text}"
    )
    return False
