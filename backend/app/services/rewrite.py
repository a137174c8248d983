"""
Rewrite table mapping pretty request paths to internal query variables.

Rules pair a regular expression, matched against the request path with
surrounding slashes removed, with a target query string in which
``$matches[N]`` refers to the N-th captured group:

    post_thumbnail/(\\d+)(/([^/]+))?  ->  index.php?post_thumbnail=$matches[1]&size=$matches[3]

Registered rules only take effect after the table is rebuilt (flushed), which
also persists them. Rebuilding is the expensive operation and callers decide
when it is needed.
"""

import json
import logging
import re
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import parse_qsl, quote

from app.models.content import RewriteRule

logger = logging.getLogger(__name__)

MATCHES_REF = re.compile(r"\$matches\[(\d+)\]")

PRIORITY_TOP = "top"
PRIORITY_BOTTOM = "bottom"


class RewriteTable:
    """Ordered set of rewrite rules with explicit rebuild."""
    
    def __init__(self, rules_path: Optional[Path] = None):
        self.rules_path = rules_path
        
        # Rules registered during this process, not yet flushed
        self._top: Dict[str, str] = {}
        self._bottom: Dict[str, str] = {}
        
        # Active rules, as last flushed
        self._rules: Dict[str, str] = self._load_rules()
        self._compiled: Dict[str, Optional[re.Pattern]] = {}
        self._dirty = False
    
    def _load_rules(self) -> Dict[str, str]:
        """Load flushed rules from disk."""
        if self.rules_path is None or not self.rules_path.exists():
            return {}
        try:
            with open(self.rules_path, "r") as f:
                data = json.load(f)
            return {
                rule.pattern: rule.target
                for rule in (RewriteRule.model_validate(r) for r in data)
            }
        except Exception as e:
            logger.error(f"Failed to load rewrite rules from {self.rules_path}: {e}")
            return {}
    
    def _save_rules(self) -> None:
        """Persist the active rules."""
        if self.rules_path is None:
            return
        self.rules_path.parent.mkdir(parents=True, exist_ok=True)
        rules = [
            RewriteRule(pattern=pattern, target=target).model_dump()
            for pattern, target in self._rules.items()
        ]
        with open(self.rules_path, "w") as f:
            json.dump(rules, f, indent=2)
    
    @property
    def dirty(self) -> bool:
        return self._dirty
    
    def current_rules(self) -> Dict[str, str]:
        """Return the active (flushed) rules, pattern -> target."""
        return dict(self._rules)
    
    def add_rule(self, pattern: str, target: str, priority: str = PRIORITY_BOTTOM) -> None:
        """Register a rule. It becomes active on the next rebuild."""
        if priority not in (PRIORITY_TOP, PRIORITY_BOTTOM):
            raise ValueError(f"Invalid rewrite rule priority: {priority!r}")
        
        self._top.pop(pattern, None)
        self._bottom.pop(pattern, None)
        if priority == PRIORITY_TOP:
            self._top[pattern] = target
        else:
            self._bottom[pattern] = target
    
    def remove_rule(self, pattern: str) -> None:
        """Unregister a rule. It stays active until the next rebuild."""
        self._top.pop(pattern, None)
        self._bottom.pop(pattern, None)
    
    def mark_dirty(self) -> None:
        self._dirty = True
    
    def rebuild_if_dirty(self) -> bool:
        """
        Replace the active rules with the registered ones and persist them.
        
        Returns True if a rebuild happened.
        """
        if not self._dirty:
            return False
        
        self._rules = {**self._top, **self._bottom}
        self._compiled.clear()
        self._save_rules()
        self._dirty = False
        
        logger.info(f"Rebuilt rewrite rules ({len(self._rules)} active)")
        return True
    
    def _compile(self, pattern: str) -> Optional[re.Pattern]:
        if pattern not in self._compiled:
            try:
                self._compiled[pattern] = re.compile(pattern)
            except re.error as e:
                logger.warning(f"Skipping invalid rewrite pattern {pattern!r}: {e}")
                self._compiled[pattern] = None
        return self._compiled[pattern]
    
    def match(self, path: str) -> Optional[Dict[str, str]]:
        """
        Match a decoded request path against the active rules.
        
        Returns the query variables of the first matching rule, or None.
        """
        request = path.strip("/")
        
        for pattern, target in self._rules.items():
            regex = self._compile(pattern)
            if regex is None:
                continue
            match = regex.match(request)
            if match:
                logger.debug(f"Path '{path}' matched rewrite rule {pattern!r}")
                return apply_matches(target, match)
        
        return None


def apply_matches(target: str, match: re.Match) -> Dict[str, str]:
    """
    Substitute ``$matches[N]`` references in a target and parse its query.
    
    Captured values are percent-encoded before substitution so that
    characters such as ``&`` or ``=`` survive query parsing intact.
    """
    groups = (match.group(0),) + match.groups()
    
    def substitute(ref: re.Match) -> str:
        index = int(ref.group(1))
        value = groups[index] if index < len(groups) else None
        return quote(value or "", safe="")
    
    query = MATCHES_REF.sub(substitute, target)
    if "?" in query:
        query = query.split("?", 1)[1]
    
    return dict(parse_qsl(query, keep_blank_values=True))
