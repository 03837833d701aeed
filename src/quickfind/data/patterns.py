"""Ignore rules: gitignore-style globs matched against walked paths."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import PurePath

import pathspec
from pathspec.patterns.gitignore import GitIgnorePatternError

_PATTERN_STYLE = "gitignore"


class PatternError(ValueError):
    """Raised when an ignore rule is not valid glob syntax."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid ignore pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


@dataclass(frozen=True, slots=True)
class CompiledRules:
    """Ordered set of compiled ignore globs.

    ``*`` and ``?`` stay inside one path segment and ``**`` spans segments.
    Directories are also tested with a trailing slash, so ``dir/**`` prunes
    ``dir`` itself.
    """

    patterns: tuple[str, ...] = ()
    spec: pathspec.PathSpec = field(default_factory=lambda: pathspec.PathSpec([]))

    def matches(self, path: str, *, is_dir: bool = False) -> bool:
        if self.spec.match_file(path):
            return True
        return is_dir and self.spec.match_file(f"{path.rstrip('/')}/")

    def __len__(self) -> int:
        return len(self.patterns)


def compile_rules(rules: Sequence[str]) -> CompiledRules:
    """Compile ignore rules, failing on the first malformed pattern."""
    factory = pathspec.lookup_pattern(_PATTERN_STYLE)
    compiled = []
    for rule in rules:
        if not rule.strip():
            raise PatternError(rule, "empty pattern")
        try:
            compiled.append(factory(rule))
        except GitIgnorePatternError as exc:
            raise PatternError(rule, str(exc)) from exc
    return CompiledRules(patterns=tuple(rules), spec=pathspec.PathSpec(compiled))


def is_ignored(
    rules: CompiledRules,
    path: str | PurePath,
    root: str | PurePath,
    *,
    is_dir: bool = False,
) -> bool:
    """Return True when any rule matches the path as walked or relative to root."""
    full = PurePath(path)
    if rules.matches(full.as_posix(), is_dir=is_dir):
        return True
    try:
        relative = full.relative_to(PurePath(root))
    except ValueError:
        return False
    relative_text = relative.as_posix()
    if relative_text == ".":
        return False
    return rules.matches(relative_text, is_dir=is_dir)
