"""
Pydantic schema package.

Domain-specific schema modules live here:
- slots.py
- templates.py
- users.py
"""
