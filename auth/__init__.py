"""
auth — User authentication module.

Provides:
  • Input validation and the error taxonomy
  • Password hashing (Argon2id; legacy bcrypt verify)
  • JWT token signing & verification
  • ``AuthService`` — signup / login / profile core
  • Signup / Login API routes and the ``get_current_claims`` dependency
"""
