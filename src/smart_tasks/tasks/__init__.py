"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, NotificationPayload)
- task_errors.py: validation / parse errors
- task_codec.py: line-oriented text format for persistence
- task_ordering.py: urgency order and "next up"
- task_filters.py: filter kinds and free-text search
- task_store.py: in-memory, lock-guarded task collection
- task_scheduler.py: polling reminder scheduler
- task_api.py: validated create/edit helpers used by the UI
"""
