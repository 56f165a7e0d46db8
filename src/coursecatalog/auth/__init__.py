"""Authentication and authorization.

Learn: HTTP Basic auth on every write. Three small pieces compose into
the authenticator:
1. credentials — parse the Authorization header
2. password — bcrypt hash on signup, constant-time verify on every request
3. authenticator — look the user up by email and check the password

guard.py then decides whether the authenticated user owns a course.
"""
