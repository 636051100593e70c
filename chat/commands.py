#!/usr/bin/env python3
"""
Chat commands

Parses what a user says to the bot into watch registry operations and
returns the reply text.

    alias <login>            Registers your GitHub login
    alias[?]                 Shows your registered GitHub login
    unalias                  Unregisters your GitHub login
    watch <owner/repo>       Watches a repository for updates
    repos[?]                 Lists the repositories you're watching
    unwatch <owner/repo>     Stops watching a repository
    watch <owner/repo#n>     Watches an issue or pull request
    issues[?]                Lists the issues you're watching
    unwatch <owner/repo#n>   Stops watching an issue or pull request
"""

import logging
import re
from typing import Callable, List, Optional, Pattern, Tuple

from watch.registry import WatchRegistry, WatchType

logger = logging.getLogger(__name__)

NO_ALIAS_REPLY = "You haven't set a GitHub alias."

REPO_NAME = r'[\w.-]+/[\w.-]+'
ISSUE_NAME = r'[\w.-]+/[\w.-]+#\d+'


class ChatCommandHandler:
    """Dispatches chat text to the first matching command."""

    def __init__(self, registry: WatchRegistry):
        self.registry = registry
        self._commands: List[Tuple[Pattern, Callable[[str, re.Match], str]]] = [
            (re.compile(r'^alias\s+([\w-]+)\s*$', re.I), self._set_alias),
            (re.compile(r'^alias\??$', re.I), self._show_alias),
            (re.compile(r'^unalias\s*$', re.I), self._remove_alias),
            (re.compile(rf'^watch ({REPO_NAME})\s*$', re.I), self._watch(WatchType.REPO)),
            (re.compile(r'^repos?\??\s*$', re.I), self._list(WatchType.REPO)),
            (re.compile(rf'^unwatch ({REPO_NAME})\s*$', re.I), self._unwatch(WatchType.REPO)),
            (re.compile(rf'^watch ({ISSUE_NAME})\s*$', re.I), self._watch(WatchType.ISSUE)),
            (re.compile(r'^issues?\??\s*$', re.I), self._list(WatchType.ISSUE)),
            (re.compile(rf'^unwatch ({ISSUE_NAME})\s*$', re.I), self._unwatch(WatchType.ISSUE)),
        ]

    def respond(self, user_id: str, text: str) -> Optional[str]:
        """
        Run the command in ``text`` for ``user_id``.

        Returns:
            The reply, or None if the text is not a command
        """
        for pattern, command in self._commands:
            match = pattern.match(text)
            if match:
                return command(user_id, match)
        return None

    # ============ Aliases ============

    def _set_alias(self, user_id: str, match: re.Match) -> str:
        alias = match.group(1)
        if not self.registry.set_alias(user_id, alias):
            return "Sorry, I couldn't save your GitHub alias. Please try again."
        return f"Your GitHub alias is set to {alias}."

    def _show_alias(self, user_id: str, match: re.Match) -> str:
        alias = self.registry.alias_for(user_id)
        if alias:
            return f"Your GitHub alias is set to {alias}."
        return NO_ALIAS_REPLY

    def _remove_alias(self, user_id: str, match: re.Match) -> str:
        if not self.registry.alias_for(user_id):
            return NO_ALIAS_REPLY
        if not self.registry.set_alias(user_id, None):
            return "Sorry, I couldn't remove your GitHub alias. Please try again."
        return "Your GitHub alias has been removed."

    # ============ Watches ============

    def _watch(self, watch_type: WatchType) -> Callable[[str, re.Match], str]:
        def command(user_id: str, match: re.Match) -> str:
            name = match.group(1)
            if not self.registry.add_watcher(watch_type, user_id, name):
                return f"Sorry, I couldn't watch the GitHub {watch_type.value} {name}. Please try again."
            return f"You are now watching the GitHub {watch_type.value} {name}."
        return command

    def _unwatch(self, watch_type: WatchType) -> Callable[[str, re.Match], str]:
        def command(user_id: str, match: re.Match) -> str:
            name = match.group(1)
            if self.registry.remove_watcher(watch_type, user_id, name):
                return f"You are no longer watching the GitHub {watch_type.value} {name}."
            return f"You are not watching the GitHub {watch_type.value} {name}."
        return command

    def _list(self, watch_type: WatchType) -> Callable[[str, re.Match], str]:
        def command(user_id: str, match: re.Match) -> str:
            items = self.registry.list_for(user_id, watch_type)
            if not items:
                return f"You are not watching any GitHub {watch_type.value}s."
            formatted = "\n".join(f"  - {item}" for item in items)
            return f"You are watching the GitHub {watch_type.value}s:\n{formatted}"
        return command
