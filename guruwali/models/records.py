from guruwali.extensions import db
from guruwali.models.mixins import SerializerMixin
from guruwali.models.user import generate_id
from datetime import datetime


JOURNAL_ASPECTS = (
    "academic",
    "character",
    "social_emotional",
    "discipline",
    "potential_interest",
)

JOURNAL_ASPECT_FIELDS = tuple(
    f"{aspect}_{suffix}"
    for aspect in JOURNAL_ASPECTS
    for suffix in ("desc", "follow_up", "notes")
)

INTERVENTION_STATUSES = ("active", "completed", "cancelled")


# ---------------- MONTHLY JOURNALS ---------------- #

class MonthlyJournal(SerializerMixin, db.Model):
    __tablename__ = "monthly_journals"

    id = db.Column(db.String(36), primary_key=True, default=generate_id)

    student_id = db.Column(
        db.String(36),
        db.ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # e.g. "Juli 2025"
    monitoring_period = db.Column(db.String(50), nullable=False)

    academic_desc = db.Column(db.Text)
    academic_follow_up = db.Column(db.Text)
    academic_notes = db.Column(db.Text)

    character_desc = db.Column(db.Text)
    character_follow_up = db.Column(db.Text)
    character_notes = db.Column(db.Text)

    social_emotional_desc = db.Column(db.Text)
    social_emotional_follow_up = db.Column(db.Text)
    social_emotional_notes = db.Column(db.Text)

    discipline_desc = db.Column(db.Text)
    discipline_follow_up = db.Column(db.Text)
    discipline_notes = db.Column(db.Text)

    potential_interest_desc = db.Column(db.Text)
    potential_interest_follow_up = db.Column(db.Text)
    potential_interest_notes = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)


# ---------------- MEETING LOGS ---------------- #

class MeetingLog(SerializerMixin, db.Model):
    __tablename__ = "meeting_logs"

    id = db.Column(db.String(36), primary_key=True, default=generate_id)

    student_id = db.Column(
        db.String(36),
        db.ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    meeting_date = db.Column(db.Date, nullable=False)

    topic = db.Column(db.String(255), nullable=False)

    follow_up = db.Column(db.Text)

    notes = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)


# ---------------- INTERVENTIONS ---------------- #

class Intervention(SerializerMixin, db.Model):
    __tablename__ = "interventions"

    id = db.Column(db.String(36), primary_key=True, default=generate_id)

    student_id = db.Column(
        db.String(36),
        db.ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    title = db.Column(db.String(150), nullable=False)

    issue = db.Column(db.Text, nullable=False)

    goal = db.Column(db.Text, nullable=False)

    action_steps = db.Column(db.Text, nullable=False)

    status = db.Column(
        db.Enum(*INTERVENTION_STATUSES, name="intervention_status"),
        nullable=False,
        default="active"
    )

    start_date = db.Column(db.Date, nullable=False)

    end_date = db.Column(db.Date)

    notes = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow
    )
