"""
auth: student authentication module.

Provides:
  • Password hashing (bcrypt, cost factor 10)
  • JWT session token creation & verification
  • Credential store over the ``students`` table
  • Register / Login API routes
  • ``get_current_user_id`` FastAPI dependency
"""
