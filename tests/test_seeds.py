from guruwali.extensions import db
from guruwali.models import MeetingLog, Student, StudentSocialUsage, User
from guruwali.seeds import DEMO_STUDENTS, seed_demo_data


def test_seed_demo_data_is_idempotent(app, teacher):
    with app.app_context():
        user = db.session.get(User, teacher["id"])

        assert seed_demo_data(user) == len(DEMO_STUDENTS)
        assert seed_demo_data(user) == 0

        assert Student.query.filter_by(user_id=user.id).count() == len(DEMO_STUDENTS)
        assert MeetingLog.query.count() == len(DEMO_STUDENTS)

        usage = StudentSocialUsage.query.filter_by(platform="TikTok").one()
        assert usage.is_active == 0


def test_cli_commands(app):
    runner = app.test_cli_runner()

    result = runner.invoke(args=[
        "create-user",
        "--email", "guru.baru@sekolah.id",
        "--password", "password123",
        "--full-name", "Pak Joko",
    ])
    assert result.exit_code == 0
    assert "guru.baru@sekolah.id" in result.output

    result = runner.invoke(args=[
        "create-user",
        "--email", "guru.baru@sekolah.id",
        "--password", "password123",
        "--full-name", "Pak Joko",
    ])
    assert result.exit_code != 0

    result = runner.invoke(args=["seed-demo", "--email", "guru.baru@sekolah.id"])
    assert result.exit_code == 0
    assert f"Seeded {len(DEMO_STUDENTS)} students" in result.output
