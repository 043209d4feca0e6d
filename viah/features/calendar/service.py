"""
Calendar provider authorization URLs (Google and Outlook).
"""

from dataclasses import dataclass
from urllib.parse import urlencode

from viah.config import settings
from viah.services.oauth_state_service import generate_oauth_state


@dataclass(frozen=True, slots=True)
class CalendarProvider:
    name: str
    authorize_url: str
    scopes: tuple[str, ...]
    extra_params: tuple[tuple[str, str], ...] = ()


PROVIDERS = {
    "google": CalendarProvider(
        name="google",
        authorize_url="https://accounts.google.com/o/oauth2/v2/auth",
        scopes=(
            "https://www.googleapis.com/auth/calendar.readonly",
            "https://www.googleapis.com/auth/calendar.events",
        ),
        extra_params=(("access_type", "offline"), ("prompt", "consent")),
    ),
    "outlook": CalendarProvider(
        name="outlook",
        authorize_url="https://login.microsoftonline.com/common/oauth2/v2.0/authorize",
        scopes=("offline_access", "Calendars.ReadWrite"),
        extra_params=(("response_mode", "query"),),
    ),
}


class CalendarAuthError(Exception):
    code = "calendar_error"


class UnknownProviderError(CalendarAuthError):
    code = "unknown_provider"


class ProviderNotConfiguredError(CalendarAuthError):
    code = "provider_not_configured"


def _client_id(provider: str) -> str | None:
    return {
        "google": settings.GOOGLE_CLIENT_ID,
        "outlook": settings.MICROSOFT_CLIENT_ID,
    }.get(provider)


def build_auth_url(provider: CalendarProvider, client_id: str, redirect_uri: str, state: str) -> str:
    params = {
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "response_type": "code",
        "scope": " ".join(provider.scopes),
        "state": state,
        **dict(provider.extra_params),
    }
    return f"{provider.authorize_url}?{urlencode(params)}"


async def create_auth_url(provider_name: str, user_id: str) -> str:
    """
    Raises:
        UnknownProviderError: provider is not google or outlook
        ProviderNotConfiguredError: no client id configured for the provider
    """
    provider = PROVIDERS.get(provider_name)
    if provider is None:
        raise UnknownProviderError(f"Unknown calendar provider: {provider_name}")

    client_id = _client_id(provider_name)
    if not client_id:
        raise ProviderNotConfiguredError(f"{provider_name} calendar integration is not configured")

    state = await generate_oauth_state(user_id, provider_name)
    return build_auth_url(provider, client_id, settings.calendar_redirect_uri(provider_name), state)
