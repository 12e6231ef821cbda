"""
Run the FastAPI backend server.
"""

import uvicorn
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


if __name__ == "__main__":
    port = int(os.getenv("PORT", "8000"))

    print("=" * 60)
    print("Church League Basketball API Server")
    print("=" * 60)
    print(f"Starting server on http://localhost:{port}")
    print(f"API Documentation: http://localhost:{port}/docs")
    print("=" * 60)

    uvicorn.run(
        "league.main:app",
        host="0.0.0.0",
        port=port,
        reload=True,
        log_level="info"
    )
