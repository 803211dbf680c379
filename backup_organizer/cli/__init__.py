"""Console scripts: remove-duplicates, organize-backups, merge-folders, remove-empty-folders."""
