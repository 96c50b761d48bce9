"""
API routers. Each module exposes `router` plus a setter for its services.
"""
