"""Factory for Supabase clients scoped to an access token."""

from dataclasses import dataclass, field

from supabase import Client, ClientOptions, create_client


@dataclass
class SupabaseClientFactory:
    """Create Supabase clients that act as the anon role or as a signed-in user."""

    url: str
    anon_key: str
    _anon_client: Client | None = field(default=None, init=False, repr=False)

    def __call__(self, access_token: str | None = None) -> Client:
        """Return a client authorized with the token, or the shared anon client."""
        if access_token is None:
            if self._anon_client is None:
                self._anon_client = create_client(self.url, self.anon_key)
            return self._anon_client
        return create_client(
            self.url,
            self.anon_key,
            options=ClientOptions(headers={"Authorization": f"Bearer {access_token}"}),
        )
