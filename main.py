#!/usr/bin/env python3
"""
Crowdin Length Checker - Entry Point
"""

import argparse

import uvicorn

from config import settings


def main():
    parser = argparse.ArgumentParser(description=settings.PROJECT_NAME)
    parser.add_argument("--host", default="0.0.0.0", help="Bind address")
    parser.add_argument("--port", type=int, default=3000, help="Bind port")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print(f"  {settings.PROJECT_NAME}")
    print("=" * 60 + "\n")
    print(f"→ Manifest: {settings.BASE_URL.rstrip('/')}/manifest.json")
    print(f"→ Docs: http://localhost:{args.port}/docs")
    print("=" * 60 + "\n")

    uvicorn.run("app:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
