"""
StuntCheck Gateway — Services Layer
=====================================

Business logic between the routes (HTTP) and the adapters/database.

Service inventory:
    - InferenceService (abstract): contract for the prediction model
    - InferenceClient: HTTP adapter for the remote model server
    - IdentityProviderClient: HTTP adapter for Supabase Auth (GoTrue)
    - ChildService: owner-scoped child profile records
    - PredictionService: input check → inference → persist, plus history
    - AccountService: register/login/update-me and the profiles table

Services hold no per-request state; each exposes a module-level singleton.
"""
