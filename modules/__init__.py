"""
Feature modules for the Ticket AI client.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's external collaborators
- models.py: Pydantic models for data transfer
- exceptions.py: Module-specific exceptions

Modules communicate through interfaces, not concrete implementations.
"""
