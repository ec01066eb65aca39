#!/usr/bin/env python3
"""
Starts the Nearby Places Streamlit client after a quick backend reachability check.
"""

import sys
import subprocess
from pathlib import Path

import requests

from places_ui.config import settings

COLORS = {"red": "\033[91m", "green": "\033[92m", "yellow": "\033[93m", "blue": "\033[94m"}

def say(message, color="blue"):
    print(f"{COLORS[color]}{message}\033[0m")

def backend_is_up() -> bool:
    try:
        return requests.get(f"{settings.BACKEND_URL}/health", timeout=2).ok
    except requests.exceptions.RequestException:
        return False

def main():
    app_path = Path(__file__).with_name("app.py")
    if not app_path.exists():
        say(f"❌ {app_path} not found.", "red")
        sys.exit(1)

    say(f"🔍 Checking backend at {settings.BACKEND_URL}...")
    if not backend_is_up():
        say("⚠️  Backend is not reachable. Start it with: cd backend && python run.py", "yellow")
        if input("Continue anyway? (y/N): ").strip().lower() != "y":
            sys.exit(1)

    say("🌐 Starting Streamlit on http://localhost:8501 (Ctrl+C to stop)", "green")
    try:
        subprocess.run([sys.executable, "-m", "streamlit", "run", str(app_path)], check=True)
    except KeyboardInterrupt:
        say("\n👋 Frontend stopped.", "yellow")
    except subprocess.CalledProcessError as e:
        say(f"\n❌ Streamlit exited with an error: {e}", "red")
        sys.exit(1)

if __name__ == "__main__":
    main()
