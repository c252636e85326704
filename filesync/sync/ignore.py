"""Gitignore-style ignore rules for scanning local directories.

Rules are loaded from ``.gitignore`` and ``.ignore`` files found while
walking a tree, plus any patterns passed in directly. A rule loaded from a
subdirectory only applies inside that subdirectory. The last matching rule
wins, so ``!pattern`` can re-include something an earlier rule excluded.
"""

import fnmatch
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

IGNORE_FILE_NAMES = (".gitignore", ".ignore")


@dataclass(frozen=True)
class IgnoreRule:
    """A single ignore pattern and the directory it was loaded from."""

    pattern: str
    base: str = ""
    negated: bool = False
    dir_only: bool = False
    anchored: bool = False

    @classmethod
    def parse(cls, line: str, base: str = "") -> Optional["IgnoreRule"]:
        """Parse one line of an ignore file.

        Returns:
            IgnoreRule, or None for blank lines and comments
        """
        line = line.strip()
        if not line or line.startswith("#"):
            return None

        negated = line.startswith("!")
        if negated:
            line = line[1:]

        dir_only = line.endswith("/")
        line = line.rstrip("/")

        # A slash anywhere but the end anchors the pattern to its base
        anchored = "/" in line
        line = line.lstrip("/")
        if not line:
            return None

        return cls(
            pattern=line,
            base=base,
            negated=negated,
            dir_only=dir_only,
            anchored=anchored,
        )

    def matches(self, relative_path: str, is_dir: bool = False) -> bool:
        """Check a root-relative path against this rule."""
        if self.dir_only and not is_dir:
            return False

        if self.base:
            prefix = self.base + "/"
            if not relative_path.startswith(prefix):
                return False
            relative_path = relative_path[len(prefix) :]

        if self.anchored:
            return _match_segments(self.pattern.split("/"), relative_path.split("/"))

        name = relative_path.rsplit("/", 1)[-1]
        return fnmatch.fnmatchcase(name, self.pattern)


def _match_segments(pattern_parts: list[str], path_parts: list[str]) -> bool:
    """Match path segments one by one; ``**`` spans any number of segments."""
    if not pattern_parts:
        return not path_parts

    head, rest = pattern_parts[0], pattern_parts[1:]
    if head == "**":
        return any(
            _match_segments(rest, path_parts[i:]) for i in range(len(path_parts) + 1)
        )

    if not path_parts:
        return False
    return fnmatch.fnmatchcase(path_parts[0], head) and _match_segments(
        rest, path_parts[1:]
    )


class IgnorePatterns:
    """Ordered collection of ignore rules for one directory tree."""

    def __init__(self, patterns: Optional[list[str]] = None) -> None:
        """Initialize with patterns that apply to the whole tree.

        Args:
            patterns: List of gitignore-style patterns
        """
        self._rules: list[IgnoreRule] = []
        for pattern in patterns or []:
            self.add_pattern(pattern)

    @property
    def rules(self) -> list[IgnoreRule]:
        return list(self._rules)

    def add_pattern(self, pattern: str, base: str = "") -> None:
        """Add an ignore pattern relative to ``base``."""
        rule = IgnoreRule.parse(pattern, base)
        if rule is not None:
            self._rules.append(rule)

    def load_from_file(self, path: Path, base: str = "") -> None:
        """Load patterns from an ignore file, if it exists."""
        if not path.is_file():
            return
        logger.debug(f"Loading ignore rules from {path}")
        with open(path, encoding="utf-8") as f:
            for line in f:
                self.add_pattern(line, base)

    def load_from_directory(self, directory: Path, base: str = "") -> None:
        """Load every known ignore file in ``directory``."""
        for name in IGNORE_FILE_NAMES:
            self.load_from_file(directory / name, base)

    def is_ignored(self, relative_path: str, is_dir: bool = False) -> bool:
        """Check whether a root-relative path is ignored."""
        ignored = False
        for rule in self._rules:
            if rule.matches(relative_path, is_dir):
                ignored = not rule.negated
        return ignored

    def is_path_excluded(
        self,
        relative_path: str,
        exclude_dot_files: bool = True,
        exclude_ignore_files: bool = True,
    ) -> bool:
        """Check a file path from a flat listing, such as S3 keys.

        Every parent folder is checked as a directory first, the way a
        directory walk skips a whole ignored folder before reaching its files.

        Args:
            relative_path: Root-relative file path with forward slashes
            exclude_dot_files: Whether any segment starting with a dot excludes
                the path
            exclude_ignore_files: Whether ignore files themselves are excluded,
                as a directory walk never lists them

        Returns:
            True if the file would not be listed by a directory walk
        """
        parts = relative_path.split("/")
        if exclude_dot_files and any(part.startswith(".") for part in parts):
            return True
        if exclude_ignore_files and parts[-1] in IGNORE_FILE_NAMES:
            return True

        for depth in range(1, len(parts)):
            if self.is_ignored("/".join(parts[:depth]), is_dir=True):
                return True
        return self.is_ignored(relative_path)
