from guruwali.extensions import db
from guruwali.models.mixins import SerializerMixin
from guruwali.models.user import generate_id
from datetime import datetime

# ---------------- STUDENTS ---------------- #

class Student(SerializerMixin, db.Model):
    __tablename__ = "students"

    id = db.Column(db.String(36), primary_key=True, default=generate_id)

    user_id = db.Column(
        db.String(36),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    full_name = db.Column(db.String(150), nullable=False)

    nis = db.Column(db.String(30))
    nisn = db.Column(db.String(30))

    # e.g. "7A", "7B"
    classroom = db.Column(db.String(20))

    # "L" or "P"
    gender = db.Column(db.String(1))

    birth_place = db.Column(db.String(100))
    birth_date = db.Column(db.String(10))
    religion = db.Column(db.String(30))
    blood_type = db.Column(db.String(5))
    economic_status = db.Column(db.String(50))
    address = db.Column(db.Text)
    phone_number = db.Column(db.String(30))

    dream = db.Column(db.String(150))
    extracurricular = db.Column(db.String(150))
    hobby = db.Column(db.String(150))

    photo_path = db.Column(db.String(255))

    parent_name = db.Column(db.String(150))
    parent_contact = db.Column(db.String(50))
    father_name = db.Column(db.String(150))
    mother_name = db.Column(db.String(150))
    father_job = db.Column(db.String(100))
    mother_job = db.Column(db.String(100))
    father_income = db.Column(db.Integer)
    mother_income = db.Column(db.Integer)

    health_history_past = db.Column(db.Text)
    health_history_current = db.Column(db.Text)
    health_history_often = db.Column(db.Text)

    character_strength = db.Column(db.Text)
    character_improvement = db.Column(db.Text)

    # always visible on the profile
    special_notes = db.Column(db.Text)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    social_usages = db.relationship(
        "StudentSocialUsage",
        backref="student",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="StudentSocialUsage.created_at"
    )
    journals = db.relationship(
        "MonthlyJournal",
        backref="student",
        lazy=True,
        cascade="all, delete-orphan"
    )
    meetings = db.relationship(
        "MeetingLog",
        backref="student",
        lazy=True,
        cascade="all, delete-orphan"
    )
    interventions = db.relationship(
        "Intervention",
        backref="student",
        lazy=True,
        cascade="all, delete-orphan"
    )

    def to_dict(self, with_social_usages=False):
        data = super().to_dict()
        if with_social_usages:
            data["social_usages"] = [
                usage.to_dict() for usage in self.social_usages
            ]
        return data


class StudentSocialUsage(SerializerMixin, db.Model):
    __tablename__ = "student_social_usages"

    id = db.Column(db.String(36), primary_key=True, default=generate_id)

    student_id = db.Column(
        db.String(36),
        db.ForeignKey("students.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    platform = db.Column(db.String(50), nullable=False)

    username = db.Column(db.String(100))

    # stored as 0/1
    is_active = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
