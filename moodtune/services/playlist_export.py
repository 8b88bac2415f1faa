"""
Export of generated playlists to a user's Spotify account.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config.settings import TrackSearchConfig
from ..errors import ExportFailed


CHUNK_SIZE = 100


class SpotifyPlaylistExporter:
    """Creates a private Spotify playlist and fills it with track URIs."""

    def __init__(self, config: TrackSearchConfig,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.transport = transport
        self.logger = logging.getLogger(__name__)

    @staticmethod
    def _json_object(response: httpx.Response, what: str) -> Dict[str, Any]:
        body = response.json()
        if not isinstance(body, dict):
            raise ExportFailed(f"Unexpected Spotify response for {what}: {type(body).__name__}")
        return body

    @staticmethod
    def _auth_headers(token: str) -> Dict[str, str]:
        return {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}

    async def export(self, access_token: str, name: str, description: str,
                     uris: List[str], public: bool = False) -> Dict[str, Any]:
        """Create the playlist and add ``uris`` in chunks.

        Returns:
            Dict with the external ``id``, ``name``, ``uri`` and ``external_url``

        Raises:
            ExportFailed: On any Spotify or transport error
        """
        if not access_token:
            raise ExportFailed("A Spotify access token is required to export")

        base = self.config.api_url.rstrip('/')
        headers = self._auth_headers(access_token)
        try:
            async with httpx.AsyncClient(timeout=self.config.timeout_seconds,
                                         transport=self.transport) as client:
                me = await client.get(f"{base}/me", headers=headers)
                me.raise_for_status()
                user_id = self._json_object(me, "/me").get('id')
                if not user_id:
                    raise ExportFailed("Could not determine the Spotify user id")

                created = await client.post(
                    f"{base}/users/{user_id}/playlists",
                    headers=headers,
                    json={'name': name, 'description': description, 'public': public}
                )
                created.raise_for_status()
                playlist = self._json_object(created, "playlist creation")
                playlist_id = playlist.get('id')
                if not playlist_id:
                    raise ExportFailed("Spotify did not return a playlist id")

                for i in range(0, len(uris), CHUNK_SIZE):
                    added = await client.post(
                        f"{base}/playlists/{playlist_id}/tracks",
                        headers=headers,
                        json={'uris': uris[i:i + CHUNK_SIZE]}
                    )
                    added.raise_for_status()
        except (httpx.HTTPError, ValueError, KeyError) as e:
            raise ExportFailed(f"Failed to create Spotify playlist: {e}") from e

        self.logger.info(f"Exported playlist {playlist_id} with {len(uris)} tracks")
        external_urls = playlist.get('external_urls')
        return {
            'id': playlist_id,
            'name': playlist.get('name', name),
            'uri': playlist.get('uri'),
            'external_url': external_urls.get('spotify') if isinstance(external_urls, dict) else None
        }
