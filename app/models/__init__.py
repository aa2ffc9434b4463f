from app.models.user import User
from app.models.club import Club
from app.models.club_member import ClubMember
from app.models.club_join_request import ClubJoinRequest, JoinRequestStatus
from app.models.club_ban import ClubBan
from app.models.event import Event, EventStatus
from app.models.challenge import Challenge, ChallengeStatus
from app.models.event_entry import EventEntry
from app.models.challenge_entry import ChallengeEntry

# This makes the models directory a Python package and ensures all models are loaded
