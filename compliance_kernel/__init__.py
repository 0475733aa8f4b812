"""
Compliance Kernel

Hiring-hall compliance tracking:
- Pure compliance state machine (direct hires vs. dispatch quota)
- Transactional, all-or-nothing run execution with dry runs
- Per-hire audit trail and per-contractor reports
- Reviewer edits with notes
"""

__version__ = "0.1.0"
