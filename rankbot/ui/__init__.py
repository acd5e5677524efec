"""
UI Module - Discord UI Components

Available components:
- AdminConfirmationView: Confirm/Cancel buttons for destructive admin actions
"""
