"""
Backup organizer.

Modules:
- junk_cleaner: removal of virtualenvs, caches and build output
- duplicate_detector: jdupes wrapper (report / interactive)
- archiver: tar.gz archives with exclusions
- pipeline: the three-phase organizer run
"""
