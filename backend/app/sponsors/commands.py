"""Administrative console commands for managing sponsors."""
from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Union

from .accounts import AccountResolver, ActorContext, AdminFlag
from .errors import InvalidArgumentCount, InvalidDuration, SponsorError
from .models import SponsorSnapshot
from .service import SponsorService

PERMANENT_LABEL = "Permanent"


@dataclass(frozen=True)
class CommandSpec:
    """Static description of a console command."""

    name: str
    usage: str
    description: str
    required_flag: AdminFlag
    min_args: int
    max_args: int

    @property
    def expected_arguments(self) -> str:
        if self.min_args == self.max_args:
            return str(self.min_args)
        return f"{self.min_args}-{self.max_args}"


ADD_COMMAND = CommandSpec(
    name="sponsorsystem_add",
    usage="sponsorsystem_add <player name or account id> <tier> [days]",
    description="Grant or update a sponsor tier. Omit days for a permanent grant.",
    required_flag=AdminFlag.SPONSOR,
    min_args=2,
    max_args=3,
)
REMOVE_COMMAND = CommandSpec(
    name="sponsorsystem_remove",
    usage="sponsorsystem_remove <player name or account id>",
    description="Remove a player from the sponsor ledger.",
    required_flag=AdminFlag.SPONSOR,
    min_args=1,
    max_args=1,
)
CHECK_COMMAND = CommandSpec(
    name="sponsorsystem_check",
    usage="sponsorsystem_check <player name or account id>",
    description="Show a player's sponsor status.",
    required_flag=AdminFlag.ADMIN,
    min_args=1,
    max_args=1,
)
LIST_COMMAND = CommandSpec(
    name="sponsorsystem_list",
    usage="sponsorsystem_list",
    description="List every sponsor, including expired ones.",
    required_flag=AdminFlag.ADMIN,
    min_args=0,
    max_args=0,
)

COMMANDS: Dict[str, CommandSpec] = {
    spec.name: spec for spec in (ADD_COMMAND, REMOVE_COMMAND, CHECK_COMMAND, LIST_COMMAND)
}


@dataclass
class CommandOutput:
    """Lines written back to the invoking shell."""

    lines: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def write(self, line: str) -> None:
        self.lines.append(line)

    def error(self, line: str) -> None:
        self.errors.append(line)

    @property
    def ok(self) -> bool:
        return not self.errors


def parse_duration_days(raw: str) -> int:
    """Parse a day count typed by an administrator."""

    candidate = raw.strip()
    if not candidate or not candidate.isascii() or not candidate.isdigit():
        raise InvalidDuration(raw)
    return int(candidate)


def format_expiry(expiry_date: Optional[datetime]) -> str:
    if expiry_date is None:
        return PERMANENT_LABEL
    return expiry_date.strftime("%Y-%m-%d")


def format_sponsor_line(sponsor: SponsorSnapshot) -> str:
    status = "Active" if sponsor.is_active else "Inactive"
    tier = sponsor.tier if sponsor.tier_recognized else f"{sponsor.tier} (unrecognized)"
    return f"{sponsor.account_id} | {tier} | {status} | {format_expiry(sponsor.expiry_date)}"


def help_lines() -> List[str]:
    return [f"{spec.usage}  {spec.description}" for spec in COMMANDS.values()]


class SponsorCommandDispatcher:
    """Parses console input and runs the matching sponsor operation."""

    def __init__(self, service: SponsorService, resolver: AccountResolver) -> None:
        self._service = service
        self._resolver = resolver

    async def execute(
        self,
        command: Union[str, Sequence[str]],
        actor: ActorContext,
    ) -> CommandOutput:
        output = CommandOutput()
        try:
            tokens = shlex.split(command) if isinstance(command, str) else list(command)
        except ValueError as exc:
            output.error(f"Could not parse command: {exc}")
            return output
        if not tokens:
            return output

        name, args = tokens[0], tokens[1:]
        if name == "help":
            for line in help_lines():
                output.write(line)
            return output

        spec = COMMANDS.get(name)
        if spec is None:
            output.error(f"Unknown command '{name}'.")
            for line in help_lines():
                output.write(line)
            return output

        try:
            actor.require_flag(spec.required_flag)
            if not spec.min_args <= len(args) <= spec.max_args:
                raise InvalidArgumentCount(expected=spec.expected_arguments, received=len(args))
            await self._run(spec, args, actor, output)
        except InvalidArgumentCount as exc:
            output.error(exc.message)
            output.write(f"Usage: {spec.usage}")
        except SponsorError as exc:
            output.error(exc.message)
        return output

    async def _run(
        self,
        spec: CommandSpec,
        args: Sequence[str],
        actor: ActorContext,
        output: CommandOutput,
    ) -> None:
        if spec is ADD_COMMAND:
            await self._add(args, actor, output)
        elif spec is REMOVE_COMMAND:
            await self._remove(args, actor, output)
        elif spec is CHECK_COMMAND:
            await self._check(args, output)
        else:
            await self._list(output)

    async def _add(self, args: Sequence[str], actor: ActorContext, output: CommandOutput) -> None:
        account_id = await self._resolver.resolve(args[0])
        tier = args[1]
        duration_days = parse_duration_days(args[2]) if len(args) == 3 else None

        result = await self._service.grant(account_id, tier, duration_days, actor=actor)
        if result.disclosed_session_id is not None:
            output.write(f"Your session id: {result.disclosed_session_id}")
        output.write(
            f"Player {account_id} now holds sponsor tier '{result.sponsor.tier}'"
            f" (expires: {format_expiry(result.sponsor.expiry_date)})."
        )

    async def _remove(self, args: Sequence[str], actor: ActorContext, output: CommandOutput) -> None:
        account_id = await self._resolver.resolve(args[0])
        await self._service.revoke(account_id, actor=actor)
        output.write(f"Sponsor status removed for {account_id}.")

    async def _check(self, args: Sequence[str], output: CommandOutput) -> None:
        account_id = await self._resolver.resolve(args[0])
        result = await self._service.query(account_id)
        output.write(f"Is sponsor: {result.is_sponsor}")
        sponsor = result.sponsor
        if sponsor is None:
            output.write(f"No sponsor record found for {account_id}.")
            return
        tier = sponsor.tier if sponsor.tier_recognized else f"{sponsor.tier} (unrecognized)"
        output.write(
            f"Tier: {tier}, expires: {format_expiry(sponsor.expiry_date)}, active: {sponsor.is_active}"
        )

    async def _list(self, output: CommandOutput) -> None:
        sponsors = await self._service.enumerate()
        if not sponsors:
            output.write("No sponsors registered.")
            return
        output.write(f"Total sponsors: {len(sponsors)}")
        for sponsor in sponsors:
            output.write(format_sponsor_line(sponsor))


__all__ = [
    "COMMANDS",
    "CommandOutput",
    "CommandSpec",
    "SponsorCommandDispatcher",
    "format_expiry",
    "format_sponsor_line",
    "parse_duration_days",
]
