"""
ASGI entry point for the MoodTune REST API.

    uvicorn api:app --host 0.0.0.0 --port 8000

or ``python api.py`` / ``moodtune serve`` for a local server with reload.
"""
from moodtune.api.app import create_app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api:app", host="0.0.0.0", port=8000, reload=True)
