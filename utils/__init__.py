"""Library App - CLI utilities

- Input validation (validators.py)
- Output rendering for due dates, fines and stats (ui_helpers.py)
"""
