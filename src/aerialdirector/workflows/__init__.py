"""Aerial Director workflows.

- state.py: image input, status model and result types
- generation.py: analyze -> generate -> complete orchestration
"""
