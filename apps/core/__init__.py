# apps/core/__init__.py

"""
Core - Taskflow base application

Contains:
- Models (User, Task, VerificationRecord)
- Identity services (one-time codes, login, profile)
- Service error taxonomy and its JSON middleware
- Ownership permissions and the token_required decorator
"""
