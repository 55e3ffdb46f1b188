"""Dispatch pipeline: request -> processor -> producer."""
from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

from .errors import CLIError, ExitCode, handle_error
from .handlers import HANDLERS, HandlerResult, Subcommand, WifiContext

ResultT = TypeVar("ResultT")

HELP_TOKENS = ("-h", "--help", "help")
VERSION_FLAG = "--version"


@dataclass
class ResultEnvelope(Generic[ResultT]):
    status: str
    payload: Optional[ResultT] = None
    diagnostics: Optional[Dict[str, Any]] = None

    def ok(self) -> bool:
        return self.status.lower() == "success"

    def exit_code(self) -> int:
        if self.payload is not None:
            return int(getattr(self.payload, "code", ExitCode.SUCCESS))
        return int((self.diagnostics or {}).get("code", ExitCode.ERROR))


def resolve_subcommand(args: Sequence[str]) -> Tuple[Subcommand, List[str]]:
    """Map argv (after global options) to a subcommand and its arguments.

    Help anywhere wins, then --version; an unknown first token is kept as an
    argument to ``info``.
    """
    if any(a in HELP_TOKENS for a in args):
        return Subcommand.HELP, []
    if VERSION_FLAG in args:
        return Subcommand.VERSION, []
    if not args:
        return Subcommand.INFO, []
    sub = Subcommand.from_token(args[0])
    if sub is None:
        return Subcommand.INFO, list(args)
    return sub, list(args[1:])


@dataclass
class WifiRequest:
    subcommand: Subcommand
    args: List[str] = field(default_factory=list)

    @classmethod
    def from_argv(cls, argv: Sequence[str]) -> "WifiRequest":
        sub, rest = resolve_subcommand(argv)
        return cls(subcommand=sub, args=rest)


class WifiProcessor:
    def __init__(self, context: WifiContext) -> None:
        self._context = context

    def process(self, payload: WifiRequest) -> ResultEnvelope[HandlerResult]:
        handler = HANDLERS[payload.subcommand]
        try:
            result = handler(self._context, payload.args)
        except CLIError as exc:
            return ResultEnvelope(
                status="error",
                diagnostics={"message": exc.message, "code": int(exc.code), "hint": exc.hint, "error": exc},
            )
        status = "success" if result.ok() else "failed"
        return ResultEnvelope(status=status, payload=result)


class WifiProducer:
    def __init__(self, verbose: bool = False) -> None:
        self._verbose = verbose

    def produce(self, result: ResultEnvelope[HandlerResult]) -> None:
        payload = result.payload
        if payload is not None:
            if payload.output:
                print(payload.output, end="")
            if payload.stderr:
                print(payload.stderr, end="" if payload.stderr.endswith("\n") else "\n", file=sys.stderr)
            return
        error = (result.diagnostics or {}).get("error")
        if isinstance(error, CLIError):
            handle_error(error, verbose=self._verbose)


def run_request(request: WifiRequest, context: WifiContext) -> int:
    envelope = WifiProcessor(context).process(request)
    WifiProducer(verbose=context.config.verbose).produce(envelope)
    return envelope.exit_code()
