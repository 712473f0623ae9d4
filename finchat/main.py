from finchat.core.app_factory import create_app

app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run("finchat.main:app", host="0.0.0.0", port=5000)
