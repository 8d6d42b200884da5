"""
Application Layer

Orchestrates the player domain against the remote node and voice gateway.

Structure:
- services/: Player, player registry and the dynamic repeat scheduler
- interfaces/: Port interfaces for infrastructure adapters
"""
