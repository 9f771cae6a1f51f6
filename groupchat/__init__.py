"""Group chat service: users, conversations, messages and push fan-out."""
