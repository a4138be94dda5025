"""GUI Package - Message collaborators and the bundled web renderer.

Structure:
    gui/
    ├── message.py      # Collaborator interfaces + send/delete helpers
    ├── collectors.py   # Activation subscriptions on an anchor message
    ├── demo.py         # Demo menu flow
    └── web/            # Web-based renderer (aiohttp + WebSocket)
"""
