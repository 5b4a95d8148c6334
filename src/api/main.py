"""
API Service - Main entry point.
Serves the HTTP API with uvicorn.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import click
import uvicorn


@click.command()
@click.option("--host", "-h", default="127.0.0.1", help="Interface to bind")
@click.option("--port", "-p", type=int, default=8000, help="Port to listen on")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def main(host: str, port: int, reload: bool):
    """Career Prep API server."""
    uvicorn.run("api.app:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    main()
