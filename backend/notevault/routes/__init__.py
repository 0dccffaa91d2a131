"""
NoteVault Backend — API Routes Package
========================================

Route Inventory:
    - auth.py:    POST /register, POST /login              (public)
    - notes.py:   POST/GET /notes, GET/PUT/DELETE /notes/{id} (auth gate)
    - health.py:  GET  /health                             (public)

Routes stay thin: extract input, call a service, shape the response.
"""
