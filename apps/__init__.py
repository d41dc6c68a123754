# apps/__init__.py

"""
Taskflow - Django applications

- core: models, identity services, permissions
- tasks: task CRUD, filters and dashboard
- notifications: per-user WebSocket channels and event fan-out
"""

__version__ = '0.1.0'
