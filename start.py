#!/usr/bin/env python3
"""
Development startup script for Test Case Generator API
"""

import shutil
import sys
from pathlib import Path


def main():
    """Main startup function"""
    print("🚀 Starting Test Case Generator API...")

    env_file = Path(".env")
    if not env_file.exists():
        print("⚠️  .env file not found. Creating from .env.example...")
        if Path(".env.example").exists():
            shutil.copy(".env.example", ".env")
            print("✅ .env file created. Please set GEMINI_API_KEY.")
        else:
            print("❌ .env.example not found!")
            sys.exit(1)

    from app.config.settings import settings

    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)

    print(f"📚 API Documentation: http://localhost:{settings.api_port}{settings.api_prefix}/docs")
    print(f"🏥 Health Check: http://localhost:{settings.api_port}{settings.api_prefix}/health")
    print("🔄 Use Ctrl+C to stop the server")

    try:
        import uvicorn
        uvicorn.run(
            "main:app",
            host=settings.api_host,
            port=settings.api_port,
            reload=True,
            log_level=settings.log_level.lower()
        )
    except KeyboardInterrupt:
        print("\n👋 Server stopped by user")


if __name__ == "__main__":
    main()
