"""
FastAPI routes for MoodTune REST API.
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status

from .schemas import (
    MoodCreateRequest,
    MoodResponse,
    MoodListResponse,
    ScoreResponse,
    AudioFeaturesResponse,
    PlaylistCreateRequest,
    PlaylistCreateResponse,
    PlaylistResponse,
    PlaylistSummaryResponse,
    PlaylistListResponse,
    TrackResponse,
    ExportResponse,
    GenreResponse,
    HealthResponse,
    MessageResponse,
    ErrorResponse
)
from .dependencies import get_config, get_current_user, get_mood_service, get_playlist_generator
from ..config.settings import AppConfig
from ..data.schemas import MoodRecord, Playlist
from ..errors import (
    ClassificationUnavailable,
    InvalidInput,
    MoodTuneError,
    NoTracksFound,
    NotFoundError,
    SearchUnavailable
)
from ..models.genres import genres_for
from ..recommendation.engine import PlaylistGenerator
from ..recommendation.schemas import GenerationRequest
from ..services.mood_service import MoodService


router = APIRouter()


def _http_error(error: MoodTuneError) -> HTTPException:
    if isinstance(error, InvalidInput):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, (NotFoundError, NoTracksFound)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, ClassificationUnavailable):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Mood analysis service temporarily unavailable. Please try again."
        )
    if isinstance(error, SearchUnavailable):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Music service temporarily unavailable. Please try again."
        )
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))


def _mood_response(record: MoodRecord) -> MoodResponse:
    analysis = record.analysis
    return MoodResponse(
        id=record.id,
        user_id=record.user_id,
        text=analysis.text,
        dominant_emotion=analysis.dominant_emotion,
        emotion_score=analysis.emotion_score,
        positivity=analysis.positivity,
        sentiment=[ScoreResponse(label=s.label, score=s.score) for s in analysis.sentiment],
        emotions=[ScoreResponse(label=e.label, score=e.score) for e in analysis.emotions],
        audio_features=AudioFeaturesResponse(**analysis.audio_features.to_dict()),
        created_at=record.created_at
    )


def _summary_fields(playlist: Playlist) -> dict:
    return dict(
        id=playlist.id,
        user_id=playlist.user_id,
        mood_id=playlist.mood_id,
        name=playlist.name,
        description=playlist.description,
        spotify_playlist_id=playlist.spotify_playlist_id,
        spotify_url=playlist.spotify_url,
        is_public=playlist.is_public,
        track_count=playlist.track_count,
        created_at=playlist.created_at
    )


def _playlist_response(playlist: Playlist) -> PlaylistResponse:
    tracks = [
        TrackResponse(
            position=entry.position,
            id=entry.track.id,
            name=entry.track.name,
            artist=entry.track.artist,
            artists=entry.track.artist_names,
            album=entry.track.album_name,
            uri=entry.track.uri,
            preview_url=entry.track.preview_url,
            duration_ms=entry.track.duration_ms,
            external_url=entry.track.external_url,
            image_url=entry.track.image_url
        )
        for entry in playlist.tracks
    ]
    return PlaylistResponse(tracks=tracks, **_summary_fields(playlist))


@router.get(
    "/health",
    response_model=HealthResponse,
    tags=["System"],
    summary="Health check endpoint"
)
async def health_check(config: AppConfig = Depends(get_config)):
    """
    Check the health status of the API.

    Reports whether the external collaborators have credentials configured.
    """
    return HealthResponse(
        status="healthy",
        version=config.versioning.api_version,
        classifier_configured=bool(config.classifier.api_key),
        search_configured=bool(config.track_search.client_id and config.track_search.client_secret)
    )


@router.post(
    "/moods",
    response_model=MoodResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Empty or oversized mood text"},
        503: {"model": ErrorResponse, "description": "Classifier unavailable"}
    },
    tags=["Moods"],
    summary="Analyze and store a mood"
)
async def create_mood(
    request: MoodCreateRequest,
    user_id: str = Depends(get_current_user),
    moods: MoodService = Depends(get_mood_service)
):
    """
    Analyze free-text mood for sentiment and emotion and store the result.

    The response carries the derived audio features used later for
    playlist generation:
    - **valence**, **energy**, **danceability**, **acousticness** (0.0-1.0)
    - **tempo** in BPM
    - **dominant_emotion**, **emotion_score** and **positivity**
    """
    try:
        record = await moods.create(user_id, request.text)
        return _mood_response(record)
    except MoodTuneError as e:
        raise _http_error(e)


@router.get(
    "/moods",
    response_model=MoodListResponse,
    tags=["Moods"],
    summary="List the current user's moods"
)
async def list_moods(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user_id: str = Depends(get_current_user),
    moods: MoodService = Depends(get_mood_service)
):
    records, total = moods.list(user_id, limit=limit, offset=offset)
    return MoodListResponse(
        moods=[_mood_response(r) for r in records],
        total=total,
        limit=limit,
        offset=offset
    )


@router.get(
    "/moods/{mood_id}",
    response_model=MoodResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Moods"],
    summary="Get a mood"
)
async def get_mood(
    mood_id: str,
    user_id: str = Depends(get_current_user),
    moods: MoodService = Depends(get_mood_service)
):
    try:
        return _mood_response(moods.get(user_id, mood_id))
    except MoodTuneError as e:
        raise _http_error(e)


@router.delete(
    "/moods/{mood_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Moods"],
    summary="Delete a mood and its playlists"
)
async def delete_mood(
    mood_id: str,
    user_id: str = Depends(get_current_user),
    moods: MoodService = Depends(get_mood_service)
):
    try:
        moods.delete(user_id, mood_id)
    except MoodTuneError as e:
        raise _http_error(e)
    return MessageResponse(message="Mood deleted successfully")


@router.post(
    "/playlists",
    response_model=PlaylistCreateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "More tracks requested than allowed"},
        404: {"model": ErrorResponse, "description": "Mood not found or no tracks found"},
        503: {"model": ErrorResponse, "description": "Music service unavailable"}
    },
    tags=["Playlists"],
    summary="Generate a playlist from a stored mood"
)
async def create_playlist(
    request: PlaylistCreateRequest,
    user_id: str = Depends(get_current_user),
    generator: PlaylistGenerator = Depends(get_playlist_generator)
):
    """
    Fetch tracks matching a stored mood and save them as a playlist.

    With **save_to_spotify** the playlist is also created in the user's
    Spotify account. That step never fails the request; its outcome is
    reported in **export**.
    """
    try:
        result = await generator.generate(GenerationRequest(
            user_id=user_id,
            mood_id=request.mood_id,
            name=request.name,
            track_count=request.track_count,
            save_to_spotify=request.save_to_spotify,
            spotify_access_token=request.spotify_access_token
        ))
    except MoodTuneError as e:
        raise _http_error(e)

    return PlaylistCreateResponse(
        playlist=_playlist_response(result.playlist),
        export=ExportResponse(
            status=result.export.status.value,
            playlist_id=result.export.playlist_id,
            url=result.export.url,
            error=result.export.error
        ),
        processing_time_ms=result.processing_time_ms
    )


@router.get(
    "/playlists",
    response_model=PlaylistListResponse,
    tags=["Playlists"],
    summary="List the current user's playlists"
)
async def list_playlists(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user_id: str = Depends(get_current_user),
    generator: PlaylistGenerator = Depends(get_playlist_generator)
):
    playlists, total = generator.list(user_id, limit=limit, offset=offset)
    return PlaylistListResponse(
        playlists=[PlaylistSummaryResponse(**_summary_fields(p)) for p in playlists],
        total=total,
        limit=limit,
        offset=offset
    )


@router.get(
    "/playlists/{playlist_id}",
    response_model=PlaylistResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Playlists"],
    summary="Get a playlist with its tracks"
)
async def get_playlist(
    playlist_id: str,
    user_id: str = Depends(get_current_user),
    generator: PlaylistGenerator = Depends(get_playlist_generator)
):
    try:
        return _playlist_response(generator.get(user_id, playlist_id))
    except MoodTuneError as e:
        raise _http_error(e)


@router.delete(
    "/playlists/{playlist_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
    tags=["Playlists"],
    summary="Delete a playlist"
)
async def delete_playlist(
    playlist_id: str,
    user_id: str = Depends(get_current_user),
    generator: PlaylistGenerator = Depends(get_playlist_generator)
):
    try:
        generator.delete(user_id, playlist_id)
    except MoodTuneError as e:
        raise _http_error(e)
    return MessageResponse(message="Playlist deleted successfully")


@router.get(
    "/genres/{emotion}",
    response_model=GenreResponse,
    tags=["Metadata"],
    summary="Genre seeds used for an emotion"
)
async def get_genres(emotion: str):
    """
    Look up the genre seeds the track search uses for an emotion.

    Unknown emotions get the default seeds.
    """
    return GenreResponse(emotion=emotion, genres=genres_for(emotion).split(","))
