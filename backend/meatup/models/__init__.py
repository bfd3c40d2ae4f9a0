"""ORM models — importing this package registers every table with Base.metadata."""
from meatup.models.user import User, MemberStatus                           # noqa: F401
from meatup.models.event import Event, EventStatus                          # noqa: F401
from meatup.models.suggestion import RestaurantSuggestion, DateSuggestion    # noqa: F401
from meatup.models.vote import RestaurantVote, DateVote                     # noqa: F401
from meatup.models.rsvp import RSVP, RSVPStatus                             # noqa: F401
from meatup.models.poll import Poll, PollStatus, PollExcludedRestaurant     # noqa: F401
from meatup.models.comment import Comment, CommentableType                  # noqa: F401
from meatup.models.activity import ActivityLog, ActivityType                # noqa: F401
