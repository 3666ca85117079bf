import click
from datetime import date, timedelta
from email_validator import validate_email, EmailNotValidError
from guruwali.extensions import db


DEMO_STUDENTS = [
    {
        "full_name": "Ahmad Rizki Pratama",
        "nisn": "0012345601",
        "classroom": "7A",
        "gender": "L",
        "parent_name": "Bapak Rizki",
        "dream": "Insinyur",
        "social_usages": [
            {"platform": "Instagram", "username": "ahmad.rizki", "is_active": True},
        ],
    },
    {
        "full_name": "Siti Nurhaliza",
        "nisn": "0012345602",
        "classroom": "7A",
        "gender": "P",
        "parent_name": "Ibu Siti Aminah",
        "hobby": "Menari",
        "social_usages": [
            {"platform": "TikTok", "username": "@siti.nur", "is_active": False},
        ],
    },
    {
        "full_name": "Budi Santoso",
        "nisn": "0012345603",
        "classroom": "7B",
        "gender": "L",
        "parent_name": "Ibu Wati",
        "father_income": 2500000,
    },
]


def create_user(email, password, full_name, nip_nuptk=None):
    """Create a teacher account; raises ValueError for invalid input."""
    from guruwali.models import User

    try:
        email = validate_email(email, check_deliverability=False).normalized.lower()
    except EmailNotValidError as e:
        raise ValueError(f"Invalid email: {str(e)}")

    if len(password) < 8:
        raise ValueError("Password must be at least 8 characters long")

    if User.query.filter_by(email=email).first():
        raise ValueError("Email already registered")

    user = User(email=email, full_name=full_name.strip(), nip_nuptk=nip_nuptk)
    user.set_password(password)

    db.session.add(user)
    db.session.commit()

    return user


def seed_demo_data(user):
    from guruwali.models import MeetingLog
    from guruwali.models import Student
    from guruwali.students.biodata import normalize_student_updates, derive_social_usage_changes
    from guruwali.utils.queries import add_social_usages

    created = 0

    for record in DEMO_STUDENTS:
        exists = Student.query.filter_by(
            user_id=user.id,
            nisn=record["nisn"]
        ).first()

        if exists:
            continue

        student_updates, social_usages = normalize_student_updates(record)
        student = Student(user_id=user.id, **student_updates)
        db.session.add(student)
        db.session.flush()

        add_social_usages(student.id, derive_social_usage_changes([], social_usages)["to_insert"])

        db.session.add(MeetingLog(
            student_id=student.id,
            meeting_date=date.today() - timedelta(days=created * 7),
            topic="Monitoring perkembangan rutin"
        ))

        created += 1

    db.session.commit()

    return created


def register_commands(app):

    @app.cli.command("create-user")
    @click.option("--email", required=True)
    @click.option("--password", required=True)
    @click.option("--full-name", required=True)
    @click.option("--nip-nuptk", default=None)
    def create_user_command(email, password, full_name, nip_nuptk):
        """Create a teacher account."""
        try:
            user = create_user(email, password, full_name, nip_nuptk)
        except ValueError as e:
            raise click.ClickException(str(e))

        click.echo(f"Created user {user.email} ({user.id})")

    @app.cli.command("seed-demo")
    @click.option("--email", required=True)
    def seed_demo_command(email):
        """Add demo students for an existing teacher account."""
        from guruwali.models import User

        user = User.query.filter_by(email=email.strip().lower()).first()
        if not user:
            raise click.ClickException(f"No user with email {email}")

        created = seed_demo_data(user)
        click.echo(f"Seeded {created} students for {user.email}")
