# apps/tasks/__init__.py

"""
Tasks - creation, assignment and tracking

- Creator-only mutation rules
- Notifications to assignees on every change
- Dashboard counters
"""
