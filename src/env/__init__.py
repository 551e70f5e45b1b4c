# src/env/__init__.py
"""Navigation configuration: navigation.yaml profiles and their dataclasses."""
