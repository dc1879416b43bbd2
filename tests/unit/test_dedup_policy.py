from score_intake.dedup import (
    DuplicatePolicy,
    PieceMatch,
    SessionMatch,
    check_source_duplicate,
    check_work_duplicate,
    resolve_deduplication_policy,
)
from score_intake.fingerprint import compute_work_fingerprint

_SHA = "a" * 64


class TestCheckSourceDuplicate:
    def test_no_match_is_new_piece(self) -> None:
        result = check_source_duplicate(_SHA, None)
        assert result.policy == DuplicatePolicy.NEW_PIECE
        assert result.is_duplicate is False
        assert result.matching_session_id is None

    def test_match_is_skip_duplicate(self) -> None:
        result = check_source_duplicate(_SHA, SessionMatch(session_id="s-1", status="COMMITTED"))
        assert result.policy == DuplicatePolicy.SKIP_DUPLICATE
        assert result.is_duplicate is True
        assert result.matching_session_id == "s-1"
        assert "s-1" in result.reason


class TestCheckWorkDuplicate:
    def test_no_match_is_new_piece(self) -> None:
        result = check_work_duplicate(compute_work_fingerprint("March"), None)
        assert result.policy == DuplicatePolicy.NEW_PIECE
        assert result.is_duplicate is False

    def test_match_goes_to_exception_review(self) -> None:
        result = check_work_duplicate(
            compute_work_fingerprint("March"),
            PieceMatch(piece_id="p-9", title="March"),
        )
        assert result.policy == DuplicatePolicy.EXCEPTION_REVIEW
        assert result.matching_piece_id == "p-9"
        assert '"March"' in result.reason

    def test_never_skips(self) -> None:
        result = check_work_duplicate(
            compute_work_fingerprint("March"),
            PieceMatch(piece_id="p-9", title="March"),
        )
        assert result.policy != DuplicatePolicy.SKIP_DUPLICATE


class TestResolveDeduplicationPolicy:
    def test_source_wins_over_work(self) -> None:
        source = check_source_duplicate(_SHA, SessionMatch(session_id="s-1", status="PENDING_REVIEW"))
        work = check_work_duplicate(
            compute_work_fingerprint("March"), PieceMatch(piece_id="p-1", title="March")
        )
        assert resolve_deduplication_policy(source, work) is source

    def test_work_used_when_no_source_match(self) -> None:
        source = check_source_duplicate(_SHA, None)
        work = check_work_duplicate(
            compute_work_fingerprint("March"), PieceMatch(piece_id="p-1", title="March")
        )
        assert resolve_deduplication_policy(source, work) is work

    def test_clean_new_piece(self) -> None:
        source = check_source_duplicate(_SHA, None)
        work = check_work_duplicate(compute_work_fingerprint("March"), None)
        result = resolve_deduplication_policy(source, work)
        assert result.policy == DuplicatePolicy.NEW_PIECE
        assert result.reason == "No duplicates detected"
        assert result is not source and result is not work

    def test_never_produces_version_update(self) -> None:
        for source_match in (None, SessionMatch(session_id="s", status="REJECTED")):
            for piece in (None, PieceMatch(piece_id="p", title="t")):
                result = resolve_deduplication_policy(
                    check_source_duplicate(_SHA, source_match),
                    check_work_duplicate(compute_work_fingerprint("t"), piece),
                )
                assert result.policy != DuplicatePolicy.VERSION_UPDATE
