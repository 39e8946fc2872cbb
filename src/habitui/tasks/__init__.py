"""
Task subsystem.

Components:
- difficulty.py: difficulty <-> wire float codec, priority tiers
- task_models.py: data structures (Task, SubTask), wire format, descriptor parsing
- reorder.py: priority reorder over any TaskBackend
- completed_store.py: SQLite store of completed todos
- task_api.py: high-level operations used by the CLI and the console
"""
