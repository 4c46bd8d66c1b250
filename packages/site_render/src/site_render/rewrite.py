from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from site_render.errors import ConfigError


@dataclass(frozen=True)
class UrlReplacementRule:
    """``new_prefix=old_prefix`` - URLs starting with *old_prefix* get *new_prefix* instead."""

    new_prefix: str
    old_prefix: str

    @classmethod
    def parse(cls, rule: str) -> "UrlReplacementRule":
        if "=" not in rule:
            raise ConfigError(
                f"--replace-url must be in the form <new-url-prefix>=<old-url-prefix>, got {rule!r}"
            )
        new, old = rule.split("=", 1)
        return cls(new_prefix=new, old_prefix=old)

    def apply(self, url: str) -> str:
        if url.startswith(self.old_prefix):
            return self.new_prefix + url[len(self.old_prefix):]
        return url


def rewrite_urls(urls: Iterable[str], rule: Optional[UrlReplacementRule | str]) -> List[str]:
    """Return a new list with *rule* applied to every URL (a copy when *rule* is None)."""
    if rule is None:
        return list(urls)
    if isinstance(rule, str):
        rule = UrlReplacementRule.parse(rule)
    return [rule.apply(u) for u in urls]
