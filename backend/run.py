#!/usr/bin/env python3
"""
Nearby Places Backend - Run Script
This script starts the FastAPI gateway server
"""

import os
import sys
import subprocess
from pathlib import Path

def print_colored(message, color="blue"):
    """Print colored output"""
    colors = {
        "red": "\033[91m",
        "green": "\033[92m",
        "yellow": "\033[93m",
        "blue": "\033[94m",
        "reset": "\033[0m"
    }
    print(f"{colors.get(color, '')}{message}{colors['reset']}")

def check_file_exists(filepath, error_message):
    """Check if a file exists"""
    if not Path(filepath).exists():
        print_colored(f"❌ Error: {error_message}", "red")
        sys.exit(1)

def find_env_file():
    """Return the first .env found in the backend folder or the project root"""
    for candidate in (Path(".env"), Path("../.env")):
        if candidate.exists():
            return candidate
    return None

def env_file_has_key(env_path, key):
    """Check that `key=<non-empty>` appears in the .env file"""
    for line in env_path.read_text(encoding="utf-8").splitlines():
        name, _, value = line.partition("=")
        if name.strip() == key and value.strip():
            return True
    return False

def main():
    print_colored("🚀 Starting Nearby Places Backend...", "blue")

    # Check if we're in the backend directory
    check_file_exists("places_api/main.py", "places_api/main.py not found. Please run this script from the backend directory.")

    # The gateway answers 500 on every request without a key, so refuse to start
    env_path = find_env_file()
    if env_path is None and not os.environ.get("API_KEY"):
        print_colored("⚠️  Warning: .env file not found in backend folder or project root.", "yellow")
        print("Please create a .env file with the following variables:")
        print("  API_KEY=your_gemini_api_key_here")
        print("  LLM_PROVIDER=gemini")
        print("  LOGGER=20")
        sys.exit(1)
    if env_path is not None and not os.environ.get("API_KEY") and not env_file_has_key(env_path, "API_KEY"):
        print_colored(f"⚠️  Warning: API_KEY is not set in {env_path}.", "yellow")
        response = input("Continue anyway? (y/N): ").strip().lower()
        if response != 'y':
            sys.exit(1)

    # Check if virtual environment is activated
    if not os.environ.get('VIRTUAL_ENV'):
        print_colored("⚠️  Virtual environment not activated.", "yellow")
        print("Please activate your virtual environment first:")
        print("  source venv/bin/activate  # On macOS/Linux")
        print("  venv\\Scripts\\activate     # On Windows")
        sys.exit(1)

    # Check if dependencies are installed
    print_colored("🔍 Checking dependencies...", "blue")
    try:
        import fastapi
        import uvicorn
    except ImportError:
        print_colored("❌ Dependencies not installed.", "red")
        print("Installing dependencies...")
        subprocess.run([sys.executable, "-m", "pip", "install", "-e", ".."], check=True)

    # Start the server
    print_colored("✅ All checks passed!", "green")
    print_colored("🌐 Starting Uvicorn server...", "blue")
    print("📍 Backend will be available at: http://localhost:8000")
    print("📍 Gateway endpoint: http://localhost:8000/api/gemini")
    print("📍 API Documentation: http://localhost:8000/docs")
    print()
    print("Press Ctrl+C to stop the server")
    print()

    # Run uvicorn with auto-reload for development
    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "places_api.main:app",
            "--reload",
            "--host", "0.0.0.0",
            "--port", "8000"
        ], check=True)
    except KeyboardInterrupt:
        print_colored("\n👋 Backend server stopped.", "yellow")
    except subprocess.CalledProcessError as e:
        print_colored(f"\n❌ Error starting server: {e}", "red")
        sys.exit(1)

if __name__ == "__main__":
    main()
