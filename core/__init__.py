"""Core Package - Frame navigation state machine.

Structure:
    core/
    ├── action_ids.py    # Activation id decomposition + classification
    ├── components.py    # Component enums and row builders
    ├── paginator.py     # Cyclic page cursor
    ├── number_block.py  # Arithmetic button grid
    ├── menu_manager.py  # Frame stack state machine
    ├── menu_config.py   # menu.yaml settings
    └── exceptions.py
"""
