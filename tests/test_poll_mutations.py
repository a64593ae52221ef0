"""
Poll lifecycle: creation, destructive update and cascading delete.
"""

from datetime import datetime, timezone, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from app.core.constants import ErrorMessages
from app.core.exception import ForbiddenError, InputValidationError, NotFoundError, StorageError
from app.models.polls import Comment, Like, Poll, PollOption, Vote
from app.services.polls import create_poll, delete_poll, update_poll
from app.services.votes import cast_vote


class TestCreatePoll:

    def test_create_with_options(self, db_session, test_user, region_tree):
        poll = create_poll(db_session, test_user.id, "  Best lunch spot?  ",
                           ["Noodles", "  Rice  ", "Bread"], region_tree.mapo.id)

        assert poll.id is not None
        assert poll.question == "Best lunch spot?"
        assert poll.creator_id == test_user.id
        assert poll.region_id == region_tree.mapo.id
        assert poll.is_active is True
        assert poll.ends_at is None
        assert poll.created_at is not None
        assert [option.text for option in poll.options] == ["Noodles", "Rice", "Bread"]
        assert all(option.vote_count == 0 for option in poll.options)

    def test_single_option_is_rejected(self, db_session, test_user, region_tree):
        with pytest.raises(InputValidationError) as exc_info:
            create_poll(db_session, test_user.id, "Lonely?", ["Only one"], region_tree.mapo.id)

        assert exc_info.value.message == "At least 2 options are required"
        assert db_session.query(Poll).count() == 0

    def test_blank_options_do_not_count(self, db_session, test_user, region_tree):
        with pytest.raises(InputValidationError):
            create_poll(db_session, test_user.id, "Really?", ["Yes", "   ", ""], region_tree.mapo.id)

    def test_too_many_options(self, db_session, test_user, region_tree):
        options = [f"Option {number}" for number in range(11)]
        with pytest.raises(InputValidationError) as exc_info:
            create_poll(db_session, test_user.id, "So many?", options, region_tree.mapo.id)
        assert exc_info.value.message == ErrorMessages.TOO_MANY_OPTIONS

    def test_option_too_long(self, db_session, test_user, region_tree):
        with pytest.raises(InputValidationError):
            create_poll(db_session, test_user.id, "Wordy?", ["x" * 101, "short"], region_tree.mapo.id)

    def test_blank_question(self, db_session, test_user, region_tree):
        with pytest.raises(InputValidationError) as exc_info:
            create_poll(db_session, test_user.id, "   ", ["Yes", "No"], region_tree.mapo.id)
        assert exc_info.value.message == ErrorMessages.QUESTION_REQUIRED

    def test_unknown_region(self, db_session, test_user, region_tree):
        with pytest.raises(NotFoundError):
            create_poll(db_session, test_user.id, "Where?", ["Here", "There"], 9999)

    def test_ends_at_is_stored_as_naive_utc(self, db_session, test_user, region_tree):
        kst = timezone(timedelta(hours=9))
        ends_at = datetime(2030, 5, 1, 18, 0, tzinfo=kst)

        poll = create_poll(db_session, test_user.id, "Closing soon?", ["Yes", "No"],
                           region_tree.mapo.id, is_active=False, ends_at=ends_at)

        assert poll.ends_at == datetime(2030, 5, 1, 9, 0)
        assert poll.is_active is False


class TestUpdatePoll:
    """Update replaces the option set and discards every ballot"""

    def test_creator_replaces_question_and_options(self, db_session, test_poll, test_user, test_user2):
        old_option_ids = [option.id for option in test_poll.options]
        cast_vote(db_session, test_user2.id, test_poll.id, old_option_ids[0])

        poll = update_poll(db_session, test_poll.id, test_user.id, "Favorite editor?",
                           ["Vim", "Emacs", "VS Code"])

        assert poll.question == "Favorite editor?"
        assert poll.updated_at is not None
        assert [option.text for option in poll.options] == ["Vim", "Emacs", "VS Code"]
        assert all(option.vote_count == 0 for option in poll.options)
        assert db_session.query(PollOption).filter(PollOption.id.in_(old_option_ids)).count() == 0
        assert db_session.query(Vote).filter(Vote.poll_id == test_poll.id).count() == 0

    def test_user_can_vote_again_after_update(self, db_session, test_poll, test_user, test_user2):
        cast_vote(db_session, test_user2.id, test_poll.id, test_poll.options[0].id)
        poll = update_poll(db_session, test_poll.id, test_user.id, "Round two?", ["A", "B"])

        vote = cast_vote(db_session, test_user2.id, poll.id, poll.options[1].id)
        assert vote.option_id == poll.options[1].id

    def test_non_creator_is_forbidden_and_nothing_changes(self, db_session, test_poll, test_user2):
        option_ids = [option.id for option in test_poll.options]

        with pytest.raises(ForbiddenError):
            update_poll(db_session, test_poll.id, test_user2.id, "Hijacked?", ["Yes", "No"])

        poll = db_session.query(Poll).filter(Poll.id == test_poll.id).first()
        assert poll.question == "Favorite Programming Language?"
        assert [option.id for option in poll.options] == option_ids
        assert poll.updated_at is None

    def test_ownership_checked_before_input(self, db_session, test_poll, test_user2):
        with pytest.raises(ForbiddenError):
            update_poll(db_session, test_poll.id, test_user2.id, "", [])

    def test_too_few_options_keeps_poll(self, db_session, test_poll, test_user):
        with pytest.raises(InputValidationError):
            update_poll(db_session, test_poll.id, test_user.id, "Still valid?", ["Only"])

        assert len(db_session.query(Poll).filter(Poll.id == test_poll.id).first().options) == 2

    def test_missing_poll(self, db_session, test_user):
        with pytest.raises(NotFoundError):
            update_poll(db_session, 9999, test_user.id, "Ghost?", ["Yes", "No"])


class TestDeletePoll:

    def test_delete_removes_everything_attached(self, db_session, test_poll, test_user, test_user2):
        poll_id = test_poll.id
        cast_vote(db_session, test_user2.id, poll_id, test_poll.options[0].id)
        db_session.add(Comment(poll_id=poll_id, user_id=test_user2.id, content="Nice poll"))
        db_session.add(Like(poll_id=poll_id, user_id=test_user2.id))
        db_session.commit()

        delete_poll(db_session, poll_id, test_user.id)

        assert db_session.query(Poll).filter(Poll.id == poll_id).first() is None
        assert db_session.query(PollOption).filter(PollOption.poll_id == poll_id).count() == 0
        assert db_session.query(Vote).filter(Vote.poll_id == poll_id).count() == 0
        assert db_session.query(Comment).filter(Comment.poll_id == poll_id).count() == 0
        assert db_session.query(Like).filter(Like.poll_id == poll_id).count() == 0

    def test_non_creator_is_forbidden(self, db_session, test_poll, test_user2):
        with pytest.raises(ForbiddenError):
            delete_poll(db_session, test_poll.id, test_user2.id)
        assert db_session.query(Poll).filter(Poll.id == test_poll.id).first() is not None

    def test_missing_poll(self, db_session, test_user):
        with pytest.raises(NotFoundError):
            delete_poll(db_session, 9999, test_user.id)


def _break_commit(monkeypatch, session):
    """Make the next commit write its changes and then fail, as a lost connection would"""

    def failing_commit():
        session.flush()
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(session, "commit", failing_commit)


class TestRollbackOnStorageFailure:
    """A failed commit leaves the poll exactly as it was"""

    def test_update_keeps_question_options_and_ballots(self, db_session, monkeypatch,
                                                         test_poll, test_user, test_user2):
        poll_id = test_poll.id
        cast_vote(db_session, test_user2.id, poll_id, test_poll.options[0].id)
        _break_commit(monkeypatch, db_session)

        with pytest.raises(StorageError) as exc_info:
            update_poll(db_session, poll_id, test_user.id, "New?", ["A", "B", "C"])

        assert exc_info.value.details == {"poll_id": poll_id}
        monkeypatch.undo()

        poll = db_session.query(Poll).filter(Poll.id == poll_id).first()
        assert poll.question == "Favorite Programming Language?"
        assert poll.updated_at is None
        assert [(option.text, option.vote_count) for option in poll.options] == [("Python", 1), ("Rust", 0)]
        assert db_session.query(PollOption).filter(PollOption.poll_id == poll_id).count() == 2
        vote = db_session.query(Vote).filter(Vote.poll_id == poll_id).one()
        assert vote.user_id == test_user2.id

    def test_delete_keeps_poll_and_everything_attached(self, db_session, monkeypatch,
                                                         test_poll, test_user, test_user2):
        poll_id = test_poll.id
        cast_vote(db_session, test_user2.id, poll_id, test_poll.options[1].id)
        db_session.add(Comment(poll_id=poll_id, user_id=test_user2.id, content="Keep me"))
        db_session.add(Like(poll_id=poll_id, user_id=test_user2.id))
        db_session.commit()
        _break_commit(monkeypatch, db_session)

        with pytest.raises(StorageError):
            delete_poll(db_session, poll_id, test_user.id)

        monkeypatch.undo()

        assert db_session.query(Poll).filter(Poll.id == poll_id).count() == 1
        options = db_session.query(PollOption).filter(PollOption.poll_id == poll_id).order_by(PollOption.id).all()
        assert [(option.text, option.vote_count) for option in options] == [("Python", 0), ("Rust", 1)]
        assert db_session.query(Vote).filter(Vote.poll_id == poll_id).count() == 1
        assert db_session.query(Comment).filter(Comment.poll_id == poll_id).count() == 1
        assert db_session.query(Like).filter(Like.poll_id == poll_id).count() == 1
