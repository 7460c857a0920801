"""CLI command modules for flowkit.

This package contains the user-facing commands:
    - branches: local branch listing and HEAD inspection
    - flow: git-flow init/list/start/publish/pull/finish/status
"""
