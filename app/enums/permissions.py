from enum import Enum


class SitePermission(str, Enum):
    # User management
    USERS_CREATE = "users:create"
    USERS_READ = "users:read"
    USERS_UPDATE = "users:update"
    USERS_DELETE = "users:delete"
    USERS_BAN = "users:ban"
    USERS_PROMOTE = "users:promote"

    # Club management
    CLUBS_CREATE = "clubs:create"
    CLUBS_READ_ALL = "clubs:read_all"
    CLUBS_UPDATE_ANY = "clubs:update_any"
    CLUBS_DELETE_ANY = "clubs:delete_any"
    CLUBS_MODERATE_ANY = "clubs:moderate_any"

    # System administration
    SYSTEM_ANALYTICS = "system:analytics"
    SYSTEM_SETTINGS = "system:settings"
    SYSTEM_LOGS = "system:logs"
    SYSTEM_MAINTENANCE = "system:maintenance"

    # Content moderation
    CONTENT_MODERATE_ALL = "content:moderate_all"
    CONTENT_DELETE_ANY = "content:delete_any"
    CONTENT_REPORT_REVIEW = "content:report_review"

    # Financial
    BILLING_READ = "billing:read"
    BILLING_UPDATE = "billing:update"
    BILLING_REFUND = "billing:refund"


class ClubPermission(str, Enum):
    # Club settings
    CLUB_READ = "club:read"
    CLUB_UPDATE = "club:update"
    CLUB_DELETE = "club:delete"
    CLUB_MANAGE_SETTINGS = "club:manage_settings"

    # Member management
    MEMBERS_INVITE = "members:invite"
    MEMBERS_REMOVE = "members:remove"
    MEMBERS_PROMOTE = "members:promote"
    MEMBERS_BAN = "members:ban"
    MEMBERS_VIEW_LIST = "members:view_list"

    # Content management
    POSTS_CREATE = "posts:create"
    POSTS_UPDATE_OWN = "posts:update_own"
    POSTS_UPDATE_ANY = "posts:update_any"
    POSTS_DELETE_OWN = "posts:delete_own"
    POSTS_DELETE_ANY = "posts:delete_any"
    POSTS_MODERATE = "posts:moderate"

    # Events
    EVENTS_CREATE = "events:create"
    EVENTS_UPDATE_OWN = "events:update_own"
    EVENTS_UPDATE_ANY = "events:update_any"
    EVENTS_DELETE_OWN = "events:delete_own"
    EVENTS_DELETE_ANY = "events:delete_any"
    EVENTS_MANAGE_ATTENDANCE = "events:manage_attendance"

    # Challenges
    CHALLENGES_CREATE = "challenges:create"
    CHALLENGES_UPDATE_OWN = "challenges:update_own"
    CHALLENGES_UPDATE_ANY = "challenges:update_any"
    CHALLENGES_DELETE_OWN = "challenges:delete_own"
    CHALLENGES_DELETE_ANY = "challenges:delete_any"
    CHALLENGES_VALIDATE_SUBMISSIONS = "challenges:validate_submissions"

    # Analytics
    ANALYTICS_VIEW = "analytics:view"
    ANALYTICS_EXPORT = "analytics:export"
