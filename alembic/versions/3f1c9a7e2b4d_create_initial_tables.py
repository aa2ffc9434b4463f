"""Create initial tables

Revision ID: 3f1c9a7e2b4d
Revises:
Create Date: 2026-10-19 10:12:41.508113

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7e2b4d"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


site_role = sa.Enum("SUPER_ADMIN", "ADMIN", "USER", name="siterole")
club_role = sa.Enum("ADMIN", "MODERATOR", "MEMBER", name="clubrole")
join_request_status = sa.Enum(
    "PENDING", "APPROVED", "REJECTED", name="joinrequeststatus"
)
event_status = sa.Enum(
    "DRAFT", "PUBLISHED", "ONGOING", "COMPLETED", "CANCELLED", name="eventstatus"
)
challenge_status = sa.Enum(
    "PENDING", "ACTIVE", "COMPLETED", "CANCELLED", name="challengestatus"
)


def upgrade() -> None:
    """Upgrade schema."""
    # Create users table
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("external_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("site_role", site_role, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_id"), "users", ["id"], unique=False)
    op.create_index(
        op.f("ix_users_external_id"), "users", ["external_id"], unique=True
    )
    op.create_index(op.f("ix_users_email"), "users", ["email"], unique=True)

    # Create clubs table
    op.create_table(
        "clubs",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("city", sa.String(), nullable=True),
        sa.Column("is_private", sa.Boolean(), nullable=False),
        sa.Column("creator_id", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["creator_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_clubs_id"), "clubs", ["id"], unique=False)

    # Create club_members table
    op.create_table(
        "club_members",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("club_id", sa.Integer(), nullable=False),
        sa.Column("role", club_role, nullable=False),
        sa.Column("joined_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["club_id"], ["clubs.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "club_id", name="uq_club_members_user_club"),
    )
    op.create_index(op.f("ix_club_members_id"), "club_members", ["id"], unique=False)
    op.create_index(
        op.f("ix_club_members_user_id"), "club_members", ["user_id"], unique=False
    )
    op.create_index(
        op.f("ix_club_members_club_id"), "club_members", ["club_id"], unique=False
    )

    # Create club_join_requests table
    op.create_table(
        "club_join_requests",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("club_id", sa.Integer(), nullable=False),
        sa.Column("status", join_request_status, nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("reviewed_by_id", sa.Integer(), nullable=True),
        sa.Column("reviewed_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["club_id"], ["clubs.id"]),
        sa.ForeignKeyConstraint(["reviewed_by_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_club_join_requests_id"), "club_join_requests", ["id"], unique=False
    )
    op.create_index(
        op.f("ix_club_join_requests_user_id"),
        "club_join_requests",
        ["user_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_club_join_requests_club_id"),
        "club_join_requests",
        ["club_id"],
        unique=False,
    )
    # Una sola solicitud PENDING por usuario y club
    op.create_index(
        "uq_club_join_requests_pending",
        "club_join_requests",
        ["user_id", "club_id"],
        unique=True,
        postgresql_where=sa.text("status = 'PENDING'"),
    )

    # Create club_bans table
    op.create_table(
        "club_bans",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("club_id", sa.Integer(), nullable=False),
        sa.Column("banned_by_id", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(), nullable=True),
        sa.Column("is_permanent", sa.Boolean(), nullable=False),
        sa.Column("expires_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["banned_by_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["club_id"], ["clubs.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "club_id", name="uq_club_bans_user_club"),
    )
    op.create_index(op.f("ix_club_bans_id"), "club_bans", ["id"], unique=False)
    op.create_index(op.f("ix_club_bans_user_id"), "club_bans", ["user_id"], unique=False)
    op.create_index(op.f("ix_club_bans_club_id"), "club_bans", ["club_id"], unique=False)

    # Create events table
    op.create_table(
        "events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("club_id", sa.Integer(), nullable=False),
        sa.Column("organizer_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("start_date_time", sa.DateTime(), nullable=True),
        sa.Column("end_date_time", sa.DateTime(), nullable=True),
        sa.Column("is_public", sa.Boolean(), nullable=False),
        sa.Column("entry_fee_usd", sa.Numeric(10, 2), nullable=True),
        sa.Column("max_attendees", sa.Integer(), nullable=True),
        sa.Column("status", event_status, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["club_id"], ["clubs.id"]),
        sa.ForeignKeyConstraint(["organizer_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_events_id"), "events", ["id"], unique=False)
    op.create_index(op.f("ix_events_club_id"), "events", ["club_id"], unique=False)

    # Create challenges table
    op.create_table(
        "challenges",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("creator_id", sa.Integer(), nullable=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("entry_fee_usd", sa.Numeric(10, 2), nullable=True),
        sa.Column("bonus_pool_percent_of_event_fees", sa.Numeric(5, 2), nullable=False),
        sa.Column("status", challenge_status, nullable=False),
        sa.Column("first_place_user_id", sa.Integer(), nullable=True),
        sa.Column("second_place_user_id", sa.Integer(), nullable=True),
        sa.Column("third_place_user_id", sa.Integer(), nullable=True),
        sa.Column("bonus_pool_usd", sa.Numeric(10, 2), nullable=True),
        sa.Column("first_place_payout_usd", sa.Numeric(10, 2), nullable=True),
        sa.Column("second_place_payout_usd", sa.Numeric(10, 2), nullable=True),
        sa.Column("third_place_payout_usd", sa.Numeric(10, 2), nullable=True),
        sa.Column("payouts_released_at", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["creator_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"]),
        sa.ForeignKeyConstraint(["first_place_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["second_place_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["third_place_user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_challenges_id"), "challenges", ["id"], unique=False)
    op.create_index(
        op.f("ix_challenges_event_id"), "challenges", ["event_id"], unique=False
    )

    # Create event_entries table
    op.create_table(
        "event_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("payment_reference", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["event_id"], ["events.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("event_id", "user_id", name="uq_event_entries_event_user"),
    )
    op.create_index(op.f("ix_event_entries_id"), "event_entries", ["id"], unique=False)
    op.create_index(
        op.f("ix_event_entries_event_id"), "event_entries", ["event_id"], unique=False
    )
    op.create_index(
        op.f("ix_event_entries_user_id"), "event_entries", ["user_id"], unique=False
    )

    # Create challenge_entries table
    op.create_table(
        "challenge_entries",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("challenge_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("payment_reference", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=True),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["challenge_id"], ["challenges.id"]),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "challenge_id", "user_id", name="uq_challenge_entries_challenge_user"
        ),
    )
    op.create_index(
        op.f("ix_challenge_entries_id"), "challenge_entries", ["id"], unique=False
    )
    op.create_index(
        op.f("ix_challenge_entries_challenge_id"),
        "challenge_entries",
        ["challenge_id"],
        unique=False,
    )
    op.create_index(
        op.f("ix_challenge_entries_user_id"),
        "challenge_entries",
        ["user_id"],
        unique=False,
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("challenge_entries")
    op.drop_table("event_entries")
    op.drop_table("challenges")
    op.drop_table("events")
    op.drop_table("club_bans")
    op.drop_index("uq_club_join_requests_pending", table_name="club_join_requests")
    op.drop_table("club_join_requests")
    op.drop_table("club_members")
    op.drop_table("clubs")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_type in (
        challenge_status,
        event_status,
        join_request_status,
        club_role,
        site_role,
    ):
        enum_type.drop(bind, checkfirst=True)
