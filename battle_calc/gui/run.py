"""Launch script for the battle calculator API."""

import argparse

import uvicorn


def _parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="python -m battle_calc.gui.run",
        description="Serve the battle calculator HTTP API",
    )
    p.add_argument("--host", type=str, default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.add_argument("--reload", action="store_true", help="Restart on source changes (development)")
    p.add_argument("--log-level", type=str, default="info")
    return p.parse_args(argv)


def main(argv=None):
    """Start the API server."""
    args = _parse_args(argv)
    uvicorn.run(
        "battle_calc.gui.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
