#!/usr/bin/env python3
"""Menu Web GUI Entry Point

Starts the demo menu behind the web server.

Usage:
    python main_gui.py              # Opens browser
    python main_gui.py --no-browser # No auto-open
    python main_gui.py --port 3000  # Custom port
"""

import sys
import logging
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from gui.web.server import main as server_main

# Configure logging (goes to terminal, not GUI)
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)


if __name__ == "__main__":
    server_main()
