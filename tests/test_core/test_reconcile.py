"""
Tests for message reconciliation.
"""
from core.models import Message, ReasoningPart, TextPart, ToolPart
from core.reconcile import message_signatures, reconcile_messages


def user(id, text="question"):
    return Message(id=id, role="user", parts=[TextPart(text=text)])


def assistant(id, *parts, stopped=False):
    return Message(id=id, role="assistant", parts=list(parts), stoppedByUser=stopped)


class TestSignatures:
    def test_all_kinds(self):
        message = assistant(
            "a",
            ReasoningPart(text="think"),
            ToolPart(toolName="search", toolCallId="c2"),
            ToolPart(toolName="extract", toolCallId="c1"),
            TextPart(text="Hello"),
        )

        assert message_signatures(message) == {"tool:c1,c2", "reasoning:think", "text:Hello"}

    def test_text_prefix_only(self):
        message = assistant("a", TextPart(text="x" * 500))

        assert message_signatures(message) == {"text:" + "x" * 200}

    def test_empty_message(self):
        assert message_signatures(assistant("a")) == set()


class TestReconcileMessages:
    """Test removal of duplicate stopped responses."""

    def test_nothing_stopped_returns_same_list(self):
        messages = [user("u1"), assistant("a1", TextPart(text="Hi"))]

        assert reconcile_messages(messages) is messages

    def test_duplicate_of_stopped_removed(self):
        stopped = assistant("A", TextPart(text="Hello wor"), stopped=True)
        duplicate = assistant("B", TextPart(text="Hello wor"))
        messages = [user("u1"), stopped, duplicate]

        result = reconcile_messages(messages)

        assert [m.id for m in result] == ["u1", "A"]

    def test_shared_tool_call_removes_duplicate(self):
        stopped = assistant("A", ToolPart(toolName="search", toolCallId="c1"), stopped=True)
        duplicate = assistant(
            "B", ToolPart(toolName="search", toolCallId="c1"), TextPart(text="Full answer")
        )

        result = reconcile_messages([user("u1"), stopped, duplicate])

        assert [m.id for m in result] == ["u1", "A"]

    def test_unrelated_assistant_kept(self):
        stopped = assistant("A", TextPart(text="First attempt"), stopped=True)
        other = assistant("B", TextPart(text="Something else"))
        messages = [user("u1"), stopped, user("u2"), other]

        result = reconcile_messages(messages)

        assert [m.id for m in result] == ["u1", "A", "u2", "B"]

    def test_user_messages_never_removed(self):
        stopped = assistant("A", TextPart(text="question"), stopped=True)

        result = reconcile_messages([user("u1", "question"), stopped])

        assert [m.id for m in result] == ["u1", "A"]

    def test_stopped_ids_count_as_stopped(self):
        first = assistant("A", TextPart(text="Hello wor"))
        second = assistant("B", TextPart(text="Hello wor"))
        messages = [user("u1"), first, second]

        result = reconcile_messages(messages, stopped_ids={"A"})

        assert [m.id for m in result] == ["u1", "A"]

    def test_all_stopped_kept(self):
        first = assistant("A", TextPart(text="same"), stopped=True)
        second = assistant("B", TextPart(text="same"), stopped=True)

        result = reconcile_messages([first, second])

        assert [m.id for m in result] == ["A", "B"]

    def test_idempotent(self):
        messages = [
            user("u1"),
            assistant("A", TextPart(text="Hello"), stopped=True),
            assistant("B", TextPart(text="Hello")),
        ]

        once = reconcile_messages(messages)

        assert [m.id for m in reconcile_messages(once)] == [m.id for m in once]
