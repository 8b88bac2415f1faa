"""
Spotify track search for MoodTune.

Uses the client-credentials flow; no user token is required to search.
"""
import logging
import time
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ..config.settings import MAX_SEARCH_LIMIT, TrackSearchConfig
from ..data.schemas import AudioFeatureVector, Track
from ..errors import SearchUnavailable


class SpotifyClientCredentials:
    """Client-credentials token with in-memory caching."""

    def __init__(self, config: TrackSearchConfig,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.transport = transport
        self._token: Optional[str] = None
        self._expires_at: float = 0.0

    async def token(self) -> str:
        now = time.time()
        if self._token and now < self._expires_at - 30:
            return self._token
        value, expires_in = await self._fetch_token()
        if not value:
            raise RuntimeError("Client credentials response did not return an access token")
        self._token = value
        self._expires_at = now + (expires_in or 3600)
        return self._token

    async def _fetch_token(self) -> Tuple[Optional[str], int]:
        if not self.config.client_id or not self.config.client_secret:
            raise RuntimeError("Spotify client credentials require client_id and client_secret")
        async with httpx.AsyncClient(timeout=self.config.timeout_seconds,
                                     transport=self.transport) as client:
            response = await client.post(
                self.config.token_url,
                data={'grant_type': 'client_credentials'},
                auth=(self.config.client_id, self.config.client_secret)
            )
            response.raise_for_status()
            data = response.json() or {}
        return data.get('access_token'), int(data.get('expires_in', 3600))


def track_from_spotify(item: Dict[str, Any]) -> Track:
    """Normalize a Spotify track object into a Track."""
    album = item.get('album') or {}
    images = album.get('images') or []
    return Track(
        id=item['id'],
        name=item.get('name', ''),
        artist_names=[a.get('name') for a in (item.get('artists') or []) if a.get('name')],
        album_name=album.get('name', ''),
        uri=item['uri'],
        duration_ms=int(item.get('duration_ms') or 0),
        external_url=(item.get('external_urls') or {}).get('spotify', ''),
        preview_url=item.get('preview_url'),
        image_url=images[0].get('url') if images else None
    )


class SpotifyTrackSearch:
    """Finds tracks close to a target audio-feature vector."""

    def __init__(self, config: TrackSearchConfig,
                 credentials: Optional[SpotifyClientCredentials] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.transport = transport
        self.credentials = credentials or SpotifyClientCredentials(config, transport=transport)
        self.logger = logging.getLogger(__name__)

    def build_params(self, features: AudioFeatureVector, genre_hint: str, limit: int) -> Dict[str, Any]:
        """Query parameters for the recommendations endpoint.

        Targets outside [0, 1] are clipped to the range Spotify accepts.
        """
        params: Dict[str, Any] = {
            'seed_genres': genre_hint,
            'limit': max(1, min(limit, MAX_SEARCH_LIMIT))
        }
        for name, value in features.search_targets().items():
            clipped = max(0.0, min(1.0, value))
            if clipped != value:
                self.logger.warning(
                    f"Target {name}={value} outside [0, 1], clipped to {clipped}"
                )
            params[f'target_{name}'] = clipped
        return params

    async def search(self, features: AudioFeatureVector, genre_hint: str, limit: int = 20) -> List[Track]:
        """Search for tracks matching ``features``.

        Returns:
            Ordered tracks, at most ``limit``; empty when nothing matched

        Raises:
            SearchUnavailable: If the token or search call fails
        """
        params = self.build_params(features, genre_hint, limit)
        try:
            token = await self.credentials.token()
            async with httpx.AsyncClient(timeout=self.config.timeout_seconds,
                                         transport=self.transport) as client:
                response = await client.get(
                    f"{self.config.api_url.rstrip('/')}/recommendations",
                    params=params,
                    headers={'Authorization': f"Bearer {token}"}
                )
                response.raise_for_status()
                data = response.json() or {}
            if not isinstance(data, dict):
                raise ValueError(f"Unexpected recommendations body: {type(data).__name__}")
            tracks = [track_from_spotify(item) for item in (data.get('tracks') or []) if item]
        except (httpx.HTTPError, RuntimeError, ValueError, KeyError, AttributeError, TypeError) as e:
            self.logger.error(f"Spotify search failed: {e}")
            raise SearchUnavailable("Failed to search Spotify tracks") from e

        self.logger.debug(f"Spotify search returned {len(tracks)} tracks for {genre_hint}")
        return tracks[:params['limit']]
