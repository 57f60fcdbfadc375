"""
Task list subsystem.

Components:
- task_models.py: data structures (Task, EditState) and the JSON codec
- task_ids.py: monotonic task id generator
- task_errors.py: persistence error types
- task_store.py: in-memory task list mirrored into a durable key-value store
"""
