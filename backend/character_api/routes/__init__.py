# Routes package init
"""
Character API - Routes Package
===============================

Route Inventory:
    - health.py:      GET /health          (liveness, no database)
                      GET /db              (database connectivity check)
                      GET /                (HTML status page)
    - characters.py:  GET /random          (random character)
                      GET /{character_id}  (character by id, random fallback)

Routes are thin: they resolve inputs, call the service or pool, and render.
"""
