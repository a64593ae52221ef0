"""
Poll aggregation: turns poll rows into PollView read models.

Everything a view needs (options, creators, regions, ballots, likes, comment
counts) is fetched with one query per table for the whole poll id set and
joined in memory, so listing N polls costs a constant number of queries.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set, Union
import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.polls import Poll, PollOption, Vote, Comment, Like
from app.models.region import Region
from app.models.user import User
from app.schemas.poll import PollView, PollOptionView
from app.schemas.region import RegionRead
from app.schemas.user import UserSummary
from app.core.constants import PollSort, ErrorMessages
from app.core.exception import NotFoundError, InputValidationError
from app.services.regions import resolve_visible_regions

logger = logging.getLogger(__name__)


@dataclass
class PollContext:
    """Rows related to a batch of polls, keyed by poll id (or by user/region id)"""
    options: Dict[int, List[PollOption]] = field(default_factory=dict)
    creators: Dict[int, User] = field(default_factory=dict)
    regions: Dict[int, Region] = field(default_factory=dict)
    comment_counts: Dict[int, int] = field(default_factory=dict)
    like_counts: Dict[int, int] = field(default_factory=dict)
    user_votes: Dict[int, int] = field(default_factory=dict)  # poll id -> chosen option id
    user_likes: Set[int] = field(default_factory=set)


def load_poll_context(db: Session, polls: List[Poll], user_id: Optional[int] = None) -> PollContext:
    """Fetch everything needed to aggregate ``polls`` in a fixed number of queries"""
    context = PollContext()
    if not polls:
        return context

    poll_ids = [poll.id for poll in polls]

    options_by_poll = defaultdict(list)
    for option in (
        db.query(PollOption)
        .filter(PollOption.poll_id.in_(poll_ids))
        .order_by(PollOption.id)
    ):
        options_by_poll[option.poll_id].append(option)
    context.options = dict(options_by_poll)

    creator_ids = {poll.creator_id for poll in polls}
    context.creators = {
        user.id: user for user in db.query(User).filter(User.id.in_(creator_ids))
    }

    region_ids = {poll.region_id for poll in polls}
    context.regions = {
        region.id: region for region in db.query(Region).filter(Region.id.in_(region_ids))
    }

    context.comment_counts = dict(
        db.query(Comment.poll_id, func.count(Comment.id))
        .filter(Comment.poll_id.in_(poll_ids))
        .group_by(Comment.poll_id)
        .all()
    )
    context.like_counts = dict(
        db.query(Like.poll_id, func.count(Like.id))
        .filter(Like.poll_id.in_(poll_ids))
        .group_by(Like.poll_id)
        .all()
    )

    # Anonymous callers get no per-user state
    if user_id is not None:
        context.user_votes = dict(
            db.query(Vote.poll_id, Vote.option_id)
            .filter(Vote.user_id == user_id, Vote.poll_id.in_(poll_ids))
            .all()
        )
        context.user_likes = {
            poll_id for (poll_id,) in
            db.query(Like.poll_id).filter(Like.user_id == user_id, Like.poll_id.in_(poll_ids))
        }

    return context


def option_percentage(vote_count: int, total_votes: int) -> int:
    """
    Share of ``total_votes`` as a whole percentage, rounding halves up.

    Each option is rounded on its own, so the shares of one poll can add up
    to 99 or 101.
    """
    if total_votes <= 0:
        return 0
    # Integer form of floor(x + 0.5) for x = vote_count * 100 / total_votes
    return (vote_count * 200 + total_votes) // (total_votes * 2)


def build_poll_view(poll: Poll, context: PollContext) -> PollView:
    options = context.options.get(poll.id, [])
    total_votes = sum(option.vote_count or 0 for option in options)
    voted_option_id = context.user_votes.get(poll.id)

    return PollView(
        id=poll.id,
        question=poll.question,
        creator=UserSummary.model_validate(context.creators[poll.creator_id]),
        region=RegionRead.model_validate(context.regions[poll.region_id]),
        options=[
            PollOptionView(
                id=option.id,
                poll_id=option.poll_id,
                text=option.text,
                vote_count=option.vote_count or 0,
                percentage=option_percentage(option.vote_count or 0, total_votes)
            )
            for option in options
        ],
        total_votes=total_votes,
        has_user_voted=voted_option_id is not None,
        user_voted_option_id=voted_option_id,
        comments_count=context.comment_counts.get(poll.id, 0),
        likes_count=context.like_counts.get(poll.id, 0),
        has_user_liked=poll.id in context.user_likes,
        is_active=poll.is_active,
        ends_at=poll.ends_at,
        created_at=poll.created_at,
        updated_at=poll.updated_at
    )


def matches_search(view: PollView, search: str) -> bool:
    """Case-insensitive substring match on the question or any option text"""
    term = search.strip().lower()
    if not term:
        return True
    if term in view.question.lower():
        return True
    return any(term in option.text.lower() for option in view.options)


def sort_poll_views(views: Iterable[PollView], sort_by: Optional[Union[str, PollSort]] = None) -> List[PollView]:
    """
    Order views for display. Without ``sort_by`` the incoming order is kept
    (callers pass polls newest first). Sorting is stable.
    """
    views = list(views)
    if sort_by is None:
        return views

    try:
        sort_by = PollSort(sort_by)
    except ValueError:
        raise InputValidationError(
            "Invalid sort option",
            sort_by=str(sort_by),
            allowed=[option.value for option in PollSort]
        )

    if sort_by == PollSort.PARTICIPANTS:
        return sorted(views, key=lambda view: view.total_votes, reverse=True)
    if sort_by == PollSort.NEWEST:
        return sorted(views, key=lambda view: (view.created_at, view.id), reverse=True)
    return sorted(views, key=lambda view: (view.created_at, view.id))


def aggregate(
    polls: List[Poll],
    context: PollContext,
    search: Optional[str] = None,
    sort_by: Optional[Union[str, PollSort]] = None
) -> List[PollView]:
    """Build views, then apply the optional text filter, then the ordering"""
    views = [build_poll_view(poll, context) for poll in polls]
    if search and search.strip():
        views = [view for view in views if matches_search(view, search)]
    return sort_poll_views(views, sort_by)


def list_polls_for_region(
    db: Session,
    region_id: int,
    user_id: Optional[int] = None,
    search: Optional[str] = None,
    sort_by: Optional[Union[str, PollSort]] = None
) -> List[PollView]:
    """Polls visible from ``region_id`` (see resolve_visible_regions), aggregated for ``user_id``"""
    scope = resolve_visible_regions(db, region_id)

    polls = (
        scope.apply(db.query(Poll))
        .order_by(Poll.created_at.desc(), Poll.id.desc())
        .all()
    )
    context = load_poll_context(db, polls, user_id)
    views = aggregate(polls, context, search=search, sort_by=sort_by)

    logger.debug(
        f"Aggregated {len(views)} of {len(polls)} polls for region {region_id} "
        f"(all regions: {scope.includes_all}, search: {search!r}, sort: {sort_by})"
    )
    return views


def get_poll_view(db: Session, poll_id: int, user_id: Optional[int] = None) -> PollView:
    poll = db.query(Poll).filter(Poll.id == poll_id).first()
    if poll is None:
        raise NotFoundError(ErrorMessages.POLL_NOT_FOUND, poll_id=poll_id)
    return build_poll_view(poll, load_poll_context(db, [poll], user_id))
