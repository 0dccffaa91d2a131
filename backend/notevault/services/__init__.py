"""
NoteVault Backend — Services Layer
====================================

What:  Business logic between routes (HTTP) and the database (persistence).

Service Inventory:
    - PasswordHasher: salted bcrypt hashing and verification
    - TokenService:   signed, time-bounded bearer tokens (issue/verify)
    - AuthService:    registration and login against the credential store
    - NoteService:    owner-scoped note CRUD (resource access controller)

PasswordHasher, TokenService and AuthService depend on configuration and are
built once by `create_app()`; NoteService is stateless and used as a
module-level instance.
"""
