"""
Google Calendar client.

Wraps the OAuth2 web flow and the handful of Calendar v3 calls the app needs.
Credentials live only in this object; callers that want them to survive a
restart must store the token dict returned by ``exchange_code`` themselves.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

import google_auth_httplib2
import httplib2
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import Flow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .config import Settings, get_settings
from .errors import CalendarSyncError, ConfigurationError, NotAuthenticatedError

logger = logging.getLogger(__name__)

SCOPES = ['https://www.googleapis.com/auth/calendar']
AUTH_URI = 'https://accounts.google.com/o/oauth2/auth'
TOKEN_URI = 'https://oauth2.googleapis.com/token'


class GoogleCalendarService:
    """OAuth2 session plus Calendar v3 operations for one user."""

    def __init__(self, settings: Optional[Settings] = None,
                 service_builder: Optional[Callable[[Credentials], Any]] = None):
        """Initialize the client.

        Args:
            settings: OAuth client and timeout settings
            service_builder: Callable building the Calendar resource from
                credentials (defaults to the discovery client over httplib2)
        """
        self.settings = settings or get_settings()
        self.service_builder = service_builder or self._build_service
        self._credentials: Optional[Credentials] = None
        self._service = None

    def _client_config(self) -> Dict[str, Any]:
        if not self.settings.google_configured:
            raise ConfigurationError("GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET must be set")
        return {
            "web": {
                "client_id": self.settings.google_client_id,
                "client_secret": self.settings.google_client_secret,
                "auth_uri": AUTH_URI,
                "token_uri": TOKEN_URI,
                "redirect_uris": [self.settings.google_redirect_uri],
            }
        }

    def _create_flow(self) -> Flow:
        # Authorization and token exchange happen in separate requests, so
        # no PKCE verifier can be carried between them
        return Flow.from_client_config(
            self._client_config(),
            scopes=SCOPES,
            redirect_uri=self.settings.google_redirect_uri,
            autogenerate_code_verifier=False,
        )

    def _build_service(self, credentials: Credentials):
        http = google_auth_httplib2.AuthorizedHttp(
            credentials, http=httplib2.Http(timeout=self.settings.calendar_timeout)
        )
        return build('calendar', 'v3', http=http, cache_discovery=False)

    def get_authorization_url(self) -> str:
        """Return the Google consent page URL (offline access)."""
        url, _state = self._create_flow().authorization_url(
            access_type='offline',
            prompt='consent',
        )
        return url

    def exchange_code(self, code: str) -> Dict[str, Any]:
        """Trade an authorization code for tokens and start using them.

        Args:
            code: Code from the OAuth redirect

        Returns:
            Token dict accepted by ``set_credentials``
        """
        flow = self._create_flow()
        flow.fetch_token(code=code)
        self._use(flow.credentials)
        logger.info("Google Calendar authorization completed")
        return self.credentials_to_dict()

    def set_credentials(self, tokens: Dict[str, Any]):
        """Use previously obtained tokens.

        Args:
            tokens: Dict with ``access_token`` (or ``token``) and optionally
                ``refresh_token``
        """
        access_token = tokens.get('access_token') or tokens.get('token')
        refresh_token = tokens.get('refresh_token')
        if not access_token and not refresh_token:
            raise ValueError("Tokens must include an access_token or refresh_token")

        self._use(Credentials(
            token=access_token,
            refresh_token=refresh_token,
            token_uri=TOKEN_URI,
            client_id=self.settings.google_client_id,
            client_secret=self.settings.google_client_secret,
            scopes=SCOPES,
        ))

    def _use(self, credentials: Credentials):
        self._credentials = credentials
        self._service = None

    def credentials_to_dict(self) -> Dict[str, Any]:
        """Return the current tokens, or an empty dict."""
        if self._credentials is None:
            return {}
        expiry = self._credentials.expiry
        return {
            'access_token': self._credentials.token,
            'refresh_token': self._credentials.refresh_token,
            'expiry': expiry.isoformat() if expiry else None,
            'scope': ' '.join(self._credentials.scopes or SCOPES),
        }

    def has_valid_credentials(self) -> bool:
        """Check for an unexpired token, or one that can be refreshed."""
        creds = self._credentials
        if creds is None:
            return False
        return bool(creds.valid or creds.refresh_token)

    def _calendar(self):
        if not self.has_valid_credentials():
            raise NotAuthenticatedError("Not authenticated with Google Calendar")
        if self._service is None:
            self._service = self.service_builder(self._credentials)
        return self._service

    def _execute(self, request, action: str) -> Dict[str, Any]:
        try:
            return request.execute()
        except (HttpError, httplib2.HttpLib2Error, OSError) as e:
            raise CalendarSyncError(f"{action} failed: {e}") from e

    def list_calendars(self) -> List[Dict[str, Any]]:
        """List the calendars on the user's calendar list."""
        response = self._execute(self._calendar().calendarList().list(), "Listing calendars")
        return response.get('items', [])

    def create_calendar(self, name: str, description: Optional[str] = None) -> Dict[str, Any]:
        """Create a secondary calendar in the configured timezone."""
        body = {
            'summary': name,
            'description': description or f"Calendar created by Syllabus Calendar for {name}",
            'timeZone': self.settings.calendar_timezone,
        }
        return self._execute(self._calendar().calendars().insert(body=body), "Creating calendar")

    def insert_event(self, calendar_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one event.

        Raises:
            NotAuthenticatedError: Without valid credentials
            CalendarSyncError: If the API call fails or times out
        """
        request = self._calendar().events().insert(calendarId=calendar_id, body=payload)
        return self._execute(request, f"Inserting \"{payload.get('summary')}\"")
