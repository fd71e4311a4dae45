"""
Feature modules for the PurdueRide backend.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's public API
- models.py: Pydantic models for data transfer
- exceptions.py: Module-specific exceptions
- service / store / queue: The implementation behind the interface

Modules communicate through interfaces, not concrete implementations.
"""
