#!/usr/bin/env python3
"""
PR Analyser Server

Runs the Flask server that the pull request page calls.
"""

import sys
from pathlib import Path

# Add src directory to Python path
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from pr_analyser.config import get_config
from pr_analyser.server import create_app

if __name__ == '__main__':
    config = get_config()
    app = create_app()

    print("Starting PR Analyser Server...")
    print(f"Server will be available at: http://{config.server.host}:{config.server.port}")
    print("Endpoints:")
    print("   - Health Check: GET /api/v1/health")
    print("   - Status: GET /api/v1/projects/<project>/repos/<repo>/pull-requests/<id>/status")
    print("   - Analyse: POST /api/v1/projects/<project>/repos/<repo>/pull-requests/<id>/analyse")
    print("   - Analyse by URL: POST /api/v1/analyse")

    app.run(
        host=config.server.host,
        port=config.server.port,
        debug=config.server.debug
    )
