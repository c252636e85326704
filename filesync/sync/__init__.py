"""Sync engine for filesync - comparison, source protocol and orchestration."""

from .comparator import FileComparator, SyncAction, SyncDecision, is_changed_from
from .engine import SyncEngine, sync_one_way
from .ignore import IGNORE_FILE_NAMES, IgnorePatterns, IgnoreRule
from .protocols import FileSource
from .scanner import DirectoryScanner

__all__ = [
    "SyncEngine",
    "sync_one_way",
    "FileSource",
    "FileComparator",
    "SyncAction",
    "SyncDecision",
    "is_changed_from",
    "DirectoryScanner",
    "IgnorePatterns",
    "IgnoreRule",
    "IGNORE_FILE_NAMES",
]
