"""Domain services: battle matchmaking/relay and persisted records.

Imported by socket handlers and HTTP routes, keeping transport concerns
separated from the battle lifecycle.
"""
