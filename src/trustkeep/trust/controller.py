# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Trust command controller.

Turns a verb plus arguments from an acting principal into operations on
two trust stores and renders the text to show.

- add: propose trustees (or add them at once when confirmation is off)
- remove: drop trustees
- list: show the actor's trustees, or another owner's with permission
- confirm / cancel: apply or discard a pending add

Actions return a ``CommandResult`` instead of printing, so any front end
(CLI, chat bridge, tests) can deliver the messages and notifications.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from uuid import UUID

from ..core.config import CoreSettings, get_config
from ..core.exceptions import DeserializationError, PersistenceError
from ..core.logging import correlation_context
from .identity import (
    PERM_ADD,
    PERM_LIST,
    PERM_LIST_OTHERS,
    PERM_REMOVE,
    IdentityResolver,
    Principal,
)
from .messages import MessageCatalog
from .store import TrustStore

logger = logging.getLogger(__name__)

# Verbs that take principal names as arguments, with the permission they need
NAMED_VERBS = {"add": PERM_ADD, "remove": PERM_REMOVE, "list": PERM_LIST}
PENDING_VERBS = ("confirm", "cancel")


@dataclass(frozen=True)
class Notification:
    """A message for a principal other than the actor."""

    recipient: UUID
    text: str


@dataclass
class CommandResult:
    """Outcome of a trust command."""

    ok: bool = True
    messages: list[str] = field(default_factory=list)
    notifications: list[Notification] = field(default_factory=list)


class TrustController:
    """Drives the trust and confirmation stores on behalf of principals.

    Args:
        trusts: Persistent store of trust records.
        confirmations: Transient store of pending adds, keyed by proposer.
        resolver: Identity capability for names and online status.
        catalog: Message catalog. Defaults to English.
        require_confirmation: Whether add is two-phase.
    """

    def __init__(
        self,
        trusts: TrustStore,
        confirmations: TrustStore,
        resolver: IdentityResolver,
        catalog: MessageCatalog | None = None,
        require_confirmation: bool = True,
    ) -> None:
        self.trusts = trusts
        self.confirmations = confirmations
        self.resolver = resolver
        self.catalog = catalog or MessageCatalog()
        self.require_confirmation = require_confirmation

    @classmethod
    def from_config(
        cls,
        resolver: IdentityResolver,
        config: CoreSettings | None = None,
    ) -> TrustController:
        """Build both stores and the catalog from settings."""
        config = config or get_config()
        trusts = TrustStore(
            config.cache_size,
            persistent=True,
            backing_root=config.trusts_dir,
            name="trusts",
        )
        confirmations = TrustStore(config.cache_size, name="confirmations")
        catalog = MessageCatalog(config.locale, override_dir=config.data_dir)
        return cls(
            trusts,
            confirmations,
            resolver,
            catalog=catalog,
            require_confirmation=config.confirm_action,
        )

    # -------------------------------------------------------------------------
    # DISPATCH
    # -------------------------------------------------------------------------

    def dispatch(self, actor: Principal, args: Sequence[str]) -> CommandResult:
        """Run a command given as ``[verb, *arguments]``.

        Unknown verbs, missing arguments and missing permissions all
        produce the usage text and a failed result.
        """
        if not args:
            return self._usage()

        verb = args[0].lower()
        rest = list(args[1:])
        with correlation_context(actor=actor.name):
            logger.debug(f"{actor.identity} ran {verb} {rest}")
            if verb == "add" and rest and actor.has_permission(PERM_ADD):
                return self.add(actor, rest)
            if verb == "remove" and rest and actor.has_permission(PERM_REMOVE):
                return self.remove(actor, rest)
            if verb == "list" and actor.has_permission(PERM_LIST):
                return self.list(actor, rest[0] if rest else None)
            if verb == "confirm":
                return self.confirm(actor)
            if verb == "cancel":
                return self.cancel(actor)
        return self._usage()

    def complete(self, actor: Principal, args: Sequence[str]) -> list[str]:
        """Completion candidates for a partially typed command."""
        if len(args) <= 1:
            prefix = args[0].lower() if args else ""
            options = [verb for verb, perm in NAMED_VERBS.items() if actor.has_permission(perm)]
            if self.confirmations.contains_key(actor.identity):
                options.extend(PENDING_VERBS)
            return [option for option in options if option.startswith(prefix)]

        if args[0].lower() in NAMED_VERBS:
            prefix = args[-1].lower()
            return [
                name
                for name in self.resolver.names()
                if name.lower().startswith(prefix) and name.lower() != actor.name.lower()
            ]
        return []

    # -------------------------------------------------------------------------
    # ACTIONS
    # -------------------------------------------------------------------------

    def add(self, actor: Principal, names: Sequence[str]) -> CommandResult:
        """Propose or grant trust to the named principals.

        Only principals that exist are considered. The actor and repeated
        names are skipped. With confirmation on, the proposal replaces any
        earlier pending one.
        """
        result = CommandResult()
        candidates: list[Principal] = []
        for name in names:
            principal = self.resolver.resolve(name)
            if principal is None or not principal.exists:
                result.messages.append(self.catalog.render("trust.unknown", name))
                continue
            if principal.identity == actor.identity:
                continue
            if any(c.identity == principal.identity for c in candidates):
                continue
            candidates.append(principal)

        if not candidates:
            result.ok = False
            result.messages.append(self.catalog.render("trust.add.none"))
            return result

        if self.require_confirmation:
            with self.confirmations.lock:
                pending = self.confirmations.load(actor.identity)
                pending[:] = [c.identity for c in candidates]
            logger.info(f"{actor.identity} proposed {len(pending)} trustee(s)")
            result.messages.append(
                self.catalog.render("trust.add.confirm", ", ".join(c.name for c in candidates))
            )
            return result

        try:
            self._grant(actor, [c.identity for c in candidates])
        except (DeserializationError, PersistenceError) as e:
            return self._failure(result, actor.name, e)
        self._announce_grants(actor, [c.identity for c in candidates], result)
        return result

    def remove(self, actor: Principal, names: Sequence[str]) -> CommandResult:
        """Revoke trust from the named principals."""
        result = CommandResult()
        removed: list[Principal] = []
        for name in names:
            principal = self.resolver.resolve(name)
            if principal is None:
                result.messages.append(self.catalog.render("trust.unknown", name))
                continue
            removed.append(principal)

        try:
            with self.trusts.lock:
                trusted = self.trusts.load(actor.identity)
                for principal in removed:
                    while principal.identity in trusted:
                        trusted.remove(principal.identity)
                self.trusts.save(actor.identity)
        except (DeserializationError, PersistenceError) as e:
            return self._failure(result, actor.name, e)

        logger.info(f"{actor.identity} revoked {len(removed)} trustee(s)")
        for principal in removed:
            result.messages.append(self.catalog.render("trust.remove", principal.name))
            if self.resolver.is_online(principal.identity):
                result.notifications.append(
                    Notification(
                        principal.identity,
                        self.catalog.render("trust.remove.notify", actor.name),
                    )
                )
        return result

    def list(self, actor: Principal, target: str | None = None) -> CommandResult:
        """List the actor's trustees, or another owner's.

        Without ``trust.list.others`` the target is ignored and the actor's
        own list is shown.
        """
        result = CommandResult()
        owner, owner_name = actor.identity, actor.name
        if target is not None and actor.has_permission(PERM_LIST_OTHERS):
            principal = self.resolver.resolve(target)
            if principal is None:
                result.ok = False
                result.messages.append(self.catalog.render("trust.unknown", target))
                return result
            owner, owner_name = principal.identity, principal.name
        is_self = owner == actor.identity

        try:
            with self.trusts.lock:
                trusted = list(self.trusts.load(owner))
        except DeserializationError as e:
            return self._failure(result, owner_name, e)

        if not trusted:
            if is_self:
                result.messages.append(self.catalog.render("trust.list.empty"))
            else:
                result.messages.append(self.catalog.render("trust.list.empty.other", owner_name))
            return result

        names = ", ".join(self._display_name(identity) for identity in trusted)
        if is_self:
            result.messages.append(self.catalog.render("trust.list", names))
        else:
            result.messages.append(self.catalog.render("trust.list.other", owner_name, names))
        return result

    def confirm(self, actor: Principal) -> CommandResult:
        """Apply the actor's pending add, if any.

        If the trust record cannot be read or written, the pending add is
        kept so the actor can confirm again.
        """
        result = CommandResult()
        with self.confirmations.lock:
            pending = self.confirmations.get(actor.identity)
            if pending is None:
                result.messages.append(self.catalog.render("trust.confirm.empty"))
                return result

            proposed = list(pending)
            try:
                self._grant(actor, proposed)
            except (DeserializationError, PersistenceError) as e:
                return self._failure(result, actor.name, e)
            self.confirmations.remove(actor.identity)
        self._announce_grants(actor, proposed, result)
        return result

    def cancel(self, actor: Principal) -> CommandResult:
        """Discard the actor's pending add, if any."""
        result = CommandResult()
        if self.confirmations.remove(actor.identity):
            logger.info(f"{actor.identity} cancelled a pending add")
            result.messages.append(self.catalog.render("trust.cancel"))
        else:
            result.messages.append(self.catalog.render("trust.confirm.empty"))
        return result

    def close(self) -> None:
        """Write any unsaved trust records. Pending adds are discarded."""
        self.trusts.flush()

    # -------------------------------------------------------------------------
    # HELPERS
    # -------------------------------------------------------------------------

    def _grant(self, actor: Principal, identities: Sequence[UUID]) -> None:
        with self.trusts.lock:
            trusted = self.trusts.load(actor.identity)
            for identity in identities:
                if identity not in trusted:
                    trusted.append(identity)
            self.trusts.save(actor.identity)
        logger.info(f"{actor.identity} now trusts {len(trusted)} principal(s)")

    def _announce_grants(
        self,
        actor: Principal,
        identities: Sequence[UUID],
        result: CommandResult,
    ) -> None:
        for identity in identities:
            result.messages.append(self.catalog.render("trust.add", self._display_name(identity)))
            if self.resolver.is_online(identity):
                result.notifications.append(
                    Notification(identity, self.catalog.render("trust.add.notify", actor.name))
                )

    def _display_name(self, identity: UUID) -> str:
        return self.resolver.name_of(identity) or str(identity)

    def _usage(self) -> CommandResult:
        return CommandResult(ok=False, messages=[self.catalog.render("trust.description")])

    def _failure(self, result: CommandResult, owner_name: str, error: Exception) -> CommandResult:
        logger.error(f"Trust store failure for {owner_name}: {error}")
        result.ok = False
        result.messages.append(self.catalog.render("trust.error", owner_name))
        return result
