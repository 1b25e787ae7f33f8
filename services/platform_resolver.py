"""
Platform detection and deep-link resolution.

A ``PlatformRule`` pairs a URL pattern with two builders: one producing the
native-app URI, one producing the web fallback. ``PlatformRegistry`` holds the
rules in priority order and resolves URLs against them.

Matching is a regex *search* on the raw string (no URL parsing), so
``"see https://youtu.be/abc"`` resolves just like ``"https://youtu.be/abc"``.
The resource id is always the last capture group, which lets a pattern use
earlier groups for alternatives such as Instagram's ``(p|reel|tv)``.

Rules are tried in insertion order and the first match wins. Re-registering an
existing name replaces the rule in place without changing its priority; new
names go to the end.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Pattern, Union

LinkBuilder = Callable[[str], str]


@dataclass(frozen=True)
class PlatformRule:
    name: str
    pattern: Pattern[str]
    deep_link: LinkBuilder
    fallback: LinkBuilder

    @classmethod
    def create(
        cls,
        name: str,
        pattern: Union[str, Pattern[str]],
        deep_link: LinkBuilder,
        fallback: LinkBuilder,
    ) -> "PlatformRule":
        """Build a rule, compiling *pattern* when given as a string.

        Raises:
            ValueError: if the pattern has no capture group.
        """
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
        if compiled.groups < 1:
            raise ValueError(f"pattern for {name!r} needs at least one capture group")
        return cls(name=name, pattern=compiled, deep_link=deep_link, fallback=fallback)

    def match(self, url: str) -> Optional[str]:
        """Return the resource id if *url* matches, else ``None``."""
        m = self.pattern.search(url)
        if m is None:
            return None
        return m.group(self.pattern.groups)


@dataclass(frozen=True)
class ResolvedLink:
    platform: str
    resource_id: str
    deep_link: str
    fallback_url: str


YOUTUBE = PlatformRule.create(
    "youtube",
    r"(?:youtube\.com/watch\?v=|youtu\.be/)([\w-]+)",
    deep_link=lambda video_id: f"vnd.youtube://watch/{video_id}",
    fallback=lambda video_id: f"https://youtube.com/watch?v={video_id}",
)

INSTAGRAM = PlatformRule.create(
    "instagram",
    r"instagram\.com/(p|reel|tv)/([\w-]+)",
    deep_link=lambda post_id: f"instagram://media?id={post_id}",
    fallback=lambda post_id: f"https://instagram.com/p/{post_id}",
)

BUILTIN_RULES: tuple[PlatformRule, ...] = (YOUTUBE, INSTAGRAM)


class PlatformRegistry:
    """Ordered, mutable set of platform rules."""

    def __init__(self, rules: tuple[PlatformRule, ...] = ()) -> None:
        self._rules: dict[str, PlatformRule] = {}
        for rule in rules:
            self.register(rule.name, rule)

    def register(self, name: str, rule: PlatformRule) -> None:
        """Insert or overwrite the rule stored under *name*.

        The rule's own ``name`` is rewritten to *name* so that resolution
        reports the registry key.
        """
        if rule.name != name:
            rule = PlatformRule(
                name=name,
                pattern=rule.pattern,
                deep_link=rule.deep_link,
                fallback=rule.fallback,
            )
        self._rules[name] = rule

    def resolve(self, url: str) -> Optional[ResolvedLink]:
        """Resolve *url* against the rules, first match wins.

        Returns ``None`` when no rule matches; never raises for a string input.
        """
        if not isinstance(url, str) or not url:
            return None
        for rule in self._rules.values():
            resource_id = rule.match(url)
            if resource_id is None:
                continue
            return ResolvedLink(
                platform=rule.name,
                resource_id=resource_id,
                deep_link=rule.deep_link(resource_id),
                fallback_url=rule.fallback(resource_id),
            )
        return None

    def get(self, name: str) -> Optional[PlatformRule]:
        return self._rules.get(name)

    def names(self) -> list[str]:
        return list(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __iter__(self) -> Iterator[PlatformRule]:
        return iter(list(self._rules.values()))

    def __len__(self) -> int:
        return len(self._rules)


def default_registry() -> PlatformRegistry:
    """Return a new registry loaded with the built-in YouTube and Instagram rules."""
    return PlatformRegistry(BUILTIN_RULES)
