"""
Message reconciliation.

Stopping a generation and regenerating it can leave two assistant messages
for the same turn: the stopped copy and an overlapping one received later.
reconcile_messages drops the overlapping copies by comparing content
signatures against those of stopped messages.

The signatures compare only the first 200 characters of text and reasoning,
so two different turns sharing that prefix are treated as duplicates.
"""

from typing import Collection, Sequence

from config.defaults import SIGNATURE_PREFIX_LENGTH
from .models import Message, ReasoningPart, TextPart, ToolPart


def message_signatures(message: Message, prefix_length: int = SIGNATURE_PREFIX_LENGTH) -> set[str]:
    """
    Compute the tool, reasoning and text signatures of a message.

    Each signature is present only when the message has that kind of content.
    """
    signatures: set[str] = set()

    tool_call_ids = sorted(
        part.toolCallId for part in message.parts if isinstance(part, ToolPart) and part.toolCallId
    )
    if tool_call_ids:
        signatures.add("tool:" + ",".join(tool_call_ids))

    reasoning = "".join(part.text for part in message.parts if isinstance(part, ReasoningPart))
    if reasoning:
        signatures.add("reasoning:" + reasoning[:prefix_length])

    text = "".join(part.text for part in message.parts if isinstance(part, TextPart))
    if text:
        signatures.add("text:" + text[:prefix_length])

    return signatures


def reconcile_messages(
    messages: Sequence[Message], stopped_ids: Collection[str] = ()
) -> Sequence[Message]:
    """
    Remove duplicate incomplete assistant messages.

    Args:
        messages: Full ordered message history
        stopped_ids: IDs the client knows were stopped but that may not carry
            ``stoppedByUser`` yet

    Returns:
        The input sequence itself when nothing was stopped, otherwise a new
        list with user messages and the surviving assistant messages in their
        original order
    """
    def is_stopped(message: Message) -> bool:
        return message.stoppedByUser or message.id in stopped_ids

    stopped = [m for m in messages if m.role == "assistant" and is_stopped(m)]
    if not stopped:
        return messages

    stopped_signatures: set[str] = set()
    for message in stopped:
        stopped_signatures |= message_signatures(message)

    result = []
    for message in messages:
        if message.role == "assistant" and not is_stopped(message):
            if message_signatures(message) & stopped_signatures:
                continue
        result.append(message)
    return result
