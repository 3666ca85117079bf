import uuid
from guruwali.extensions import db
from flask_login import UserMixin
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash


def generate_id():
    return str(uuid.uuid4())


class User(UserMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=generate_id)

    email = db.Column(db.String(120), unique=True, nullable=False)

    password_hash = db.Column(db.String(255), nullable=False)

    full_name = db.Column(db.String(150), nullable=False)

    # Nomor Induk Pegawai / NUPTK
    nip_nuptk = db.Column(db.String(30))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    school_profile = db.relationship(
        "SchoolProfile",
        backref="user",
        uselist=False,
        cascade="all, delete-orphan"
    )
    students = db.relationship(
        "Student",
        backref="owner",
        lazy=True,
        cascade="all, delete-orphan"
    )

    # ------------------
    # Auth helpers
    # ------------------

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_session(self):
        return {
            "user_id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "nip_nuptk": self.nip_nuptk,
        }


class SchoolProfile(db.Model):
    __tablename__ = "school_profiles"

    id = db.Column(db.String(36), primary_key=True, default=generate_id)

    user_id = db.Column(
        db.String(36),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )

    school_name = db.Column(db.String(150), nullable=False)

    # SD, SMP, SMA, SMK
    education_stage = db.Column(db.String(10), nullable=False)

    city_district = db.Column(db.String(100), nullable=False)

    address = db.Column(db.Text)

    school_email = db.Column(db.String(120))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
