"""Schematics collections and their resolution.

- **locator**: manifest location (local file or ``node_modules`` package)
- **collection**: collection resolution, ``extends`` included
- **schematic**: ``schema.json`` normalisation
- **collections**: per-workspace-folder registry
"""
