"""
Backup Organizer - backup maintenance utilities.

Packages:
- dedup: priority-based removal of duplicates listed in a jdupes report
- organizer: junk cleanup, duplicate report generation, archiving
- merge: folder merge with destination priority
- prune: empty folder removal
- config: logging, settings, cleanup profiles, exceptions
"""

__version__ = "2.0.0"
