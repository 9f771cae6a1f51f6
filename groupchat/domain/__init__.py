"""
DOMAIN LAYER - Business rules with no I/O

This layer contains:
- entities/      → User, Membership, Message
- value_objects/ → validated identifiers and attributes
- services/      → pure domain services (message clock)
- ports/         → interfaces that infrastructure implements
- exceptions/    → the error taxonomy
"""
