# src/monitoring/__init__.py
"""
Monitoring for the navigation stack: event bus, JSONL event log and a
console map view.
"""
