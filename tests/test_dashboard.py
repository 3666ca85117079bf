from datetime import date

from guruwali.extensions import db
from guruwali.models import MeetingLog, MonthlyJournal, Student
from guruwali.utils.dates import get_month_start, get_week_start
from guruwali.utils.queries import get_dashboard_stats


def test_week_and_month_start():
    # Wednesday
    today = date(2025, 7, 16)

    assert get_week_start(today) == date(2025, 7, 14)
    assert get_month_start(today) == date(2025, 7, 1)
    assert get_week_start(date(2025, 7, 14)) == date(2025, 7, 14)


def test_dashboard_stats(app, teacher, foreign_student_id):
    with app.app_context():
        students = [
            Student(user_id=teacher["id"], full_name=name)
            for name in ("Arya", "Budi", "Citra", "Dewi", "Eko", "Fajar", "Gita", "Hana")
        ]
        db.session.add_all(students)
        db.session.flush()

        # two journals for one student still count once
        db.session.add_all([
            MonthlyJournal(student_id=students[0].id, monitoring_period="Juni 2025"),
            MonthlyJournal(student_id=students[0].id, monitoring_period="Juli 2025"),
            MonthlyJournal(student_id=foreign_student_id, monitoring_period="Juli 2025"),
        ])

        db.session.add_all([
            MeetingLog(student_id=students[0].id, meeting_date=date(2025, 7, 15), topic="A"),
            MeetingLog(student_id=students[1].id, meeting_date=date(2025, 7, 3), topic="B"),
            MeetingLog(student_id=students[2].id, meeting_date=date(2025, 6, 30), topic="C"),
            MeetingLog(student_id=foreign_student_id, meeting_date=date(2025, 7, 15), topic="D"),
        ])
        db.session.commit()

        stats = get_dashboard_stats(teacher["id"], today=date(2025, 7, 16))

    assert stats == {
        "total_students": 8,
        "students_assessed": 1,
        "students_not_assessed": 7,
        # 12.5 rounds up
        "assessment_percentage": 13,
        "total_meetings": 3,
        "meetings_this_week": 1,
        "meetings_this_month": 2,
    }


def test_dashboard_stats_without_students(app, teacher):
    with app.app_context():
        stats = get_dashboard_stats(teacher["id"])

    assert stats["total_students"] == 0
    assert stats["assessment_percentage"] == 0


def test_dashboard_endpoint(auth_client, student_id):
    auth_client.post("/api/journals", json={
        "student_id": student_id,
        "monitoring_period": "Juli 2025",
    })

    response = auth_client.get("/api/dashboard/stats")

    assert response.status_code == 200
    data = response.get_json()
    assert data["total_students"] == 1
    assert data["students_assessed"] == 1
    assert data["assessment_percentage"] == 100
