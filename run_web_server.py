"""
Form Builder HTTP API Entry Point.

Usage:
    python run_web_server.py
    # Then open http://localhost:9110 for the rendered preview

    # Another port
    FORM_BUILDER_SERVER_PORT=9200 python run_web_server.py
"""

import sys
from pathlib import Path

# Add src to path for local development
sys.path.insert(0, str(Path(__file__).parent / "src"))

from form_builder.web_server import main

if __name__ == "__main__":
    main()
