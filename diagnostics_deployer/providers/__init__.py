"""
Provider implementations package.

Each provider implements the ResourceProvider protocol from
core.protocols.

Package Structure:
    providers/
    ├── __init__.py         # This file
    ├── base.py             # Shared base class
    └── azure/              # Azure implementation
        ├── __init__.py
        ├── provider.py     # AzureProvider class
        ├── resources.py    # Per-resource create/destroy/check functions
        └── naming.py       # Random resource names
"""
