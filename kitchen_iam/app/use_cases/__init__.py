"""
Use Cases

Organized into domain folders:
- auth/: Login, refresh rotation, request authentication, logout
- users/: Principal administration and session revocation
- rate_limit/: Fixed-window request counting
- maintenance/: Periodic cleanup

Import from subdirectories for better organization.
"""
