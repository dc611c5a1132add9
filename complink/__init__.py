"""
complink - bind component definitions to files on disk and keep them in sync.

Export, update, reload and restore components against a per-document source
folder with single-generation backups, plus per-component notes.
"""

__version__ = "1.0.0"
