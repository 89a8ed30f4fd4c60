"""
Command Processor
=================
Turns one line from the input station into an action on the AppState.

Supported commands:
    /add <name> [#tag1,tag2] [@folder1,folder2]   create a card
    /ollama <prompt>                              ask the inference collaborator

Anything else is reported as not implemented. Failures never raise out of
this module; they come back as a CommandResult with an explicit kind.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Callable, Optional

from tronk.controller.inference import InferenceResult
from tronk.controller.parser import CommandSyntaxError, EmptyNameError, parse_add_arguments
from tronk.model.card import Card
from tronk.model.state import AppState

logger = logging.getLogger(__name__)

ADD_PREFIX = "/add"
OLLAMA_PREFIX = "/ollama"

INVALID_FORMAT_MESSAGE = "invalid card format. try: '/add cardname #tag1,tag2 @folder1,folder2'"
EMPTY_NAME_MESSAGE = "card name cannot be empty"
EMPTY_PROMPT_MESSAGE = "no prompt provided"
NOTHING_TO_UNDO_MESSAGE = "nothing to undo"


class CommandKind(StrEnum):
    CREATED = "created"
    INVALID_SYNTAX = "invalid_syntax"
    EMPTY_NAME = "empty_name"
    EMPTY_PROMPT = "empty_prompt"
    UNIMPLEMENTED = "unimplemented"
    INFERENCE_PENDING = "inference_pending"
    INFERENCE_COMPLETED = "inference_completed"
    INFERENCE_FAILED = "inference_failed"
    UNDONE = "undone"
    NOTHING_TO_UNDO = "nothing_to_undo"


@dataclass(frozen=True)
class CommandResult:
    kind: CommandKind
    message: str
    card: Optional[Card] = None
    prompt: Optional[str] = None
    ticket: Optional[int] = None

    @property
    def mutated(self) -> bool:
        return self.kind in (CommandKind.CREATED, CommandKind.UNDONE)


InferenceRunner = Callable[[str], InferenceResult]


def _inference_message(result: InferenceResult) -> CommandResult:
    kind = CommandKind.INFERENCE_COMPLETED if result.ok else CommandKind.INFERENCE_FAILED
    return CommandResult(kind=kind, message=result.text)


class CommandProcessor:
    """
    Args:
        run_inference: Optional blocking runner for `/ollama`. When omitted,
            `/ollama` returns an INFERENCE_PENDING result carrying a ticket
            and the caller is expected to run the prompt elsewhere and hand
            the answer to `complete_inference`.
    """

    def __init__(self, run_inference: Optional[InferenceRunner] = None) -> None:
        self.run_inference = run_inference

    def process(self, raw_input: str, state: AppState) -> CommandResult:
        text = raw_input.strip()
        logger.debug(f"Processing command: {text!r}")

        # A new command supersedes any answer still in flight
        state.cancel_pending()

        if text.startswith(ADD_PREFIX):
            result = self._add(text[len(ADD_PREFIX):], state)
        elif text.startswith(OLLAMA_PREFIX):
            result = self._ollama(text, state)
        else:
            result = CommandResult(CommandKind.UNIMPLEMENTED, f"command: {text}, is not implemented")

        state.system_output = result.message
        state.input_buffer = ""
        return result

    def _add(self, payload: str, state: AppState) -> CommandResult:
        try:
            args = parse_add_arguments(payload)
        except EmptyNameError:
            return CommandResult(CommandKind.EMPTY_NAME, EMPTY_NAME_MESSAGE)
        except CommandSyntaxError as e:
            logger.debug(f"Rejected /add payload {payload!r}: {e}")
            return CommandResult(CommandKind.INVALID_SYNTAX, INVALID_FORMAT_MESSAGE)

        card = Card(name=args.name, description="", url="", tags=args.tags, folders=args.folders)
        state.history.push(state.cards)
        state.cards.append(card)
        state.is_modified = True
        logger.info(f"Card created: {card.name} ({card.id})")
        return CommandResult(CommandKind.CREATED, f"card created with name: {card.name}", card=card)

    def _ollama(self, text: str, state: AppState) -> CommandResult:
        parts = text.split(None, 1)
        prompt = parts[1].strip() if len(parts) > 1 else ""
        if not prompt:
            return CommandResult(CommandKind.EMPTY_PROMPT, EMPTY_PROMPT_MESSAGE)

        if self.run_inference is not None:
            return _inference_message(self.run_inference(prompt))

        ticket = state.issue_ticket()
        logger.info(f"Inference request #{ticket} queued.")
        return CommandResult(
            CommandKind.INFERENCE_PENDING,
            f"command: {text}, is being processed...",
            prompt=prompt,
            ticket=ticket,
        )


def complete_inference(state: AppState, ticket: int, result: InferenceResult) -> Optional[CommandResult]:
    """
    Apply the answer of an asynchronous request.

    Returns None (and leaves the state alone) when the ticket is no longer
    the pending one, i.e. the user has issued another command since.
    """
    if state.pending_request != ticket:
        logger.debug(f"Ignoring stale inference result #{ticket} (pending: {state.pending_request}).")
        return None

    state.pending_request = None
    outcome = _inference_message(result)
    state.system_output = outcome.message
    return outcome


def undo(state: AppState) -> CommandResult:
    """Restore the card list as it was before the last mutation."""
    if not state.history:
        state.system_output = NOTHING_TO_UNDO_MESSAGE
        return CommandResult(CommandKind.NOTHING_TO_UNDO, NOTHING_TO_UNDO_MESSAGE)

    state.replace_cards(state.history.pop())
    state.is_modified = True
    if state.detailed_card is not None and state.detailed_card not in state.cards:
        state.detailed_card = None

    message = f"undo: restored {len(state.cards)} cards"
    state.system_output = message
    logger.info(message)
    return CommandResult(CommandKind.UNDONE, message)
