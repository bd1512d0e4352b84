# Services package init
"""
Character API - Services Layer
===============================

What:  Record access sitting between routes (HTTP) and the connection pool.

Service Inventory:
    - CharacterService: lookup by id, random id selection, random fetch
"""
