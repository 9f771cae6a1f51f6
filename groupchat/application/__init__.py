"""
APPLICATION LAYER - Use cases as command and query handlers

- commands/  → operations that write (users, conversations, messages, tasks)
- queries/   → read-only operations
- dto/       → pydantic models returned by the HTTP layer
"""
