#!/usr/bin/env python3
"""
Product Catalog Entry Point

Starts the FastAPI server for the product catalog service.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from product_catalog.api import run_server
from product_catalog.config import get_config


if __name__ == "__main__":
    config = get_config()
    print("Starting Product Catalog...")
    print(f"Storage: {config.storage_backend} ({config.database_path})")
    print(f"API available at: http://localhost:{config.api_port}")
    print(f"Documentation at: http://localhost:{config.api_port}/docs")
    print()

    try:
        run_server(debug=False)
    except KeyboardInterrupt:
        print("\nShutting down Product Catalog...")
    except Exception as e:
        print(f"Error starting server: {e}")
        sys.exit(1)
