import pytest

from app.core.exception import AlreadyVotedError, NotFoundError, StorageError
from app.models.polls import PollOption, Vote
from app.services.votes import cast_vote, get_user_vote_option, has_user_voted
from app.services.aggregation import get_poll_view


class TestCastVote:
    """One ballot per user and poll"""

    def test_vote_records_ballot_and_increments_counter(self, db_session, test_poll, test_user2):
        option = test_poll.options[0]

        vote = cast_vote(db_session, test_user2.id, test_poll.id, option.id)

        assert vote.id is not None
        assert vote.option_id == option.id
        assert vote.created_at is not None
        assert db_session.query(PollOption).filter(PollOption.id == option.id).first().vote_count == 1
        assert has_user_voted(db_session, test_user2.id, test_poll.id)
        assert get_user_vote_option(db_session, test_user2.id, test_poll.id) == option.id

    def test_creator_may_vote(self, db_session, test_poll, test_user):
        cast_vote(db_session, test_user.id, test_poll.id, test_poll.options[1].id)
        assert has_user_voted(db_session, test_user.id, test_poll.id)

    def test_second_vote_is_rejected_and_counts_unchanged(self, db_session, test_poll, test_user2):
        first, second = test_poll.options[0].id, test_poll.options[1].id
        cast_vote(db_session, test_user2.id, test_poll.id, first)

        for option_id in (first, second):
            with pytest.raises(AlreadyVotedError):
                cast_vote(db_session, test_user2.id, test_poll.id, option_id)

        view = get_poll_view(db_session, test_poll.id, test_user2.id)
        assert [option.vote_count for option in view.options] == [1, 0]
        assert view.user_voted_option_id == first
        assert db_session.query(Vote).count() == 1

    def test_votes_from_different_users_add_up(self, db_session, test_poll, test_user, test_user2):
        option_id = test_poll.options[0].id
        cast_vote(db_session, test_user.id, test_poll.id, option_id)
        cast_vote(db_session, test_user2.id, test_poll.id, option_id)

        view = get_poll_view(db_session, test_poll.id)
        assert view.total_votes == 2
        assert view.options[0].percentage == 100
        assert view.options[1].percentage == 0

    def test_unknown_poll(self, db_session, test_poll, test_user2):
        with pytest.raises(NotFoundError):
            cast_vote(db_session, test_user2.id, 9999, test_poll.options[0].id)

    def test_unknown_option(self, db_session, test_poll, test_user2):
        with pytest.raises(NotFoundError):
            cast_vote(db_session, test_user2.id, test_poll.id, 9999)

    def test_option_from_another_poll(self, db_session, make_poll, test_poll, test_user, test_user2, region_tree):
        other = make_poll(test_user, region_tree.suwon, options=("Left", "Right"))

        with pytest.raises(NotFoundError) as exc_info:
            cast_vote(db_session, test_user2.id, test_poll.id, other.options[0].id)

        assert exc_info.value.details["option_id"] == other.options[0].id
        assert not has_user_voted(db_session, test_user2.id, test_poll.id)
        assert db_session.query(Vote).count() == 0

    def test_constraint_failure_other_than_duplicate_is_a_storage_error(self, db_session, test_poll):
        # No such user: the foreign key rejects the ballot, not the one-vote rule
        option_id = test_poll.options[0].id

        with pytest.raises(StorageError) as exc_info:
            cast_vote(db_session, 9999, test_poll.id, option_id)

        assert exc_info.value.details == {"poll_id": test_poll.id, "option_id": option_id}
        assert db_session.query(Vote).count() == 0
        assert db_session.query(PollOption).filter(PollOption.id == option_id).first().vote_count == 0


class TestVoteLookups:

    def test_no_vote(self, db_session, test_poll, test_user2):
        assert get_user_vote_option(db_session, test_user2.id, test_poll.id) is None
        assert has_user_voted(db_session, test_user2.id, test_poll.id) is False
