# Services package init
"""
HerbScape Backend — Services Layer
====================================

What:  Data access layer between the catalog components and the outside world.
How:   Each service wraps one backend: the herbs table, the Supabase edge
       functions, the Supabase auth provider, or the remedies webhook.
       Failures surface as HerbScapeError subclasses; callers decide how to
       present them (toasts, in practice).

Service Inventory:
    - HerbService:     SELECT * FROM herbs
    - FunctionsClient: identify-plant and translate-plant edge functions
    - AuthService:     token → user, sign-out, admin role lookup
                       (ClientAuth: per-client session + state change events)
    - RemedyService:   POST to the remedies webhook
"""
