"""Run the TOMS document engine."""
import uvicorn

from toms.config import get_settings


def main():
    """Run the FastAPI application."""
    settings = get_settings()

    print()
    print("Starting TOMS document engine...")
    print(f"Documents are saved to {settings.output_dir}")
    print(f"Open http://localhost:{settings.port}/docs in your browser")
    print("Press Ctrl+C to stop the server")
    print()

    uvicorn.run(
        "toms.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload
    )


if __name__ == "__main__":
    main()
