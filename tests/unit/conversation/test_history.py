"""Tests for history fetching and merging."""

import pytest

from threadview.conversation.history import (
    HistoryFetcher,
    merge_histories,
    split_by_conversation,
)
from threadview.conversation.models import Conversation
from threadview.exceptions import HistoryFetchFailed
from tests.factories import annotated, message


class TestMergeHistories:
    """Tests for the merge rule."""

    def test_newest_first_across_conversations(self, at) -> None:
        c1 = annotated([message("user", "a", at(0)), message("assistant", "b", at(2))], "c1")
        c2 = annotated([message("user", "c", at(1))], "c2")

        merged = merge_histories([c1, c2])

        assert [m.text for m in merged] == ["b", "c", "a"]
        assert [m.conversation_id for m in merged] == ["c1", "c2", "c1"]

    def test_missing_timestamps_sort_oldest_and_stay_stable(self, at) -> None:
        history = annotated([
            message("user", "x"),
            message("assistant", "y"),
            message("user", "z", at(0)),
        ])

        merged = merge_histories([history])

        assert [m.text for m in merged] == ["z", "x", "y"]

    def test_equal_timestamps_keep_fetch_order(self, at) -> None:
        c1 = annotated([message("user", "first", at(3))], "c1")
        c2 = annotated([message("user", "second", at(3))], "c2")

        assert [m.text for m in merge_histories([c1, c2])] == ["first", "second"]

    def test_empty(self) -> None:
        assert merge_histories([]) == ()


class TestSplitByConversation:
    """Merging then splitting recovers each conversation's own order."""

    def test_round_trip(self, at) -> None:
        c1 = annotated(
            [
                message("user", "a", at(0)),
                message("assistant", "b", at(4)),
                message("user", "c", at(8)),
            ],
            "c1",
        )
        c2 = annotated(
            [message("user", "d", at(2)), message("assistant", "e", at(6))],
            "c2",
        )

        groups = split_by_conversation(merge_histories([c1, c2]))

        assert groups["c1"] == tuple(c1)
        assert groups["c2"] == tuple(c2)

    def test_round_trip_with_missing_timestamps(self) -> None:
        c1 = annotated([message("user", "a"), message("assistant", "b")], "c1")

        groups = split_by_conversation(merge_histories([c1]))

        assert groups["c1"] == tuple(c1)


class TestFetchAll:
    """Tests for concurrent retrieval."""

    @pytest.mark.asyncio
    async def test_fetches_every_conversation(self, mock_backend) -> None:
        fetcher = HistoryFetcher(mock_backend)

        merged = await fetcher.fetch_all(mock_backend.conversations)

        assert len(merged) == 6
        assert merged[0].text == "In spring."
        assert merged[0].conversation_title == "Travel plans"
        assert {call["conversation_id"] for call in mock_backend.calls("get_history")} == {
            "c1",
            "c2",
        }

    @pytest.mark.asyncio
    async def test_one_failure_fails_the_whole_fetch(self, mock_backend) -> None:
        """c1 succeeds, c2 fails: nothing from c1 is returned."""
        mock_backend.failing_histories.add("c2")
        fetcher = HistoryFetcher(mock_backend)

        with pytest.raises(HistoryFetchFailed) as exc_info:
            await fetcher.fetch_all(mock_backend.conversations)

        assert exc_info.value.conversation_id == "c2"

    @pytest.mark.asyncio
    async def test_result_independent_of_completion_order(self, mock_backend) -> None:
        fetcher = HistoryFetcher(mock_backend)

        mock_backend.history_delays = {"c1": 0.02}
        slow_first = await fetcher.fetch_all(mock_backend.conversations)

        mock_backend.history_delays = {"c2": 0.02}
        slow_second = await fetcher.fetch_all(mock_backend.conversations)

        assert slow_first == slow_second

    @pytest.mark.asyncio
    async def test_no_conversations(self, mock_backend) -> None:
        assert await HistoryFetcher(mock_backend).fetch_all([]) == ()
        assert mock_backend.calls("get_history") == []

    @pytest.mark.asyncio
    async def test_unknown_conversation_has_empty_history(self, mock_backend) -> None:
        merged = await HistoryFetcher(mock_backend).fetch_all([Conversation(id="new")])
        assert merged == ()
