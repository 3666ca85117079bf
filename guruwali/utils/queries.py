from datetime import date
from flask import current_app
from sqlalchemy import func
from guruwali.extensions import db
from guruwali.models import Student, StudentSocialUsage, MonthlyJournal, MeetingLog, Intervention
from guruwali.utils.dates import get_week_start, get_month_start


def get_owned_student(student_id, user_id):
    """The student when it exists and belongs to ``user_id``, else None."""
    if not student_id:
        return None

    return Student.query.filter_by(id=student_id, user_id=user_id).first()


def add_social_usages(student_id, rows):
    for row in rows:
        db.session.add(StudentSocialUsage(
            student_id=student_id,
            platform=row["platform"],
            username=row["username"],
            is_active=row["is_active"]
        ))


def apply_social_usage_changes(student_id, changes):
    """
    Write the output of ``derive_social_usage_changes`` to the session.

    The caller commits; inserts, per-row updates and the delete batch all
    land in the same transaction.
    """
    add_social_usages(student_id, changes["to_insert"])

    for row in changes["to_update"]:
        StudentSocialUsage.query.filter_by(
            id=row["id"],
            student_id=student_id
        ).update({
            "platform": row["platform"],
            "username": row["username"],
            "is_active": row["is_active"],
        }, synchronize_session="fetch")

    if changes["to_delete"]:
        StudentSocialUsage.query.filter(
            StudentSocialUsage.student_id == student_id,
            StudentSocialUsage.id.in_(changes["to_delete"])
        ).delete(synchronize_session="fetch")

    current_app.logger.debug(
        f"Social usages for student {student_id}: "
        f"{len(changes['to_insert'])} inserted, "
        f"{len(changes['to_update'])} updated, "
        f"{len(changes['to_delete'])} deleted"
    )


def get_dashboard_stats(user_id, today=None):

    week_start = get_week_start(today)
    month_start = get_month_start(today)

    total_students = db.session.query(
        func.count(Student.id)
    ).filter(
        Student.user_id == user_id
    ).scalar() or 0

    students_assessed = db.session.query(
        func.count(func.distinct(MonthlyJournal.student_id))
    ).join(
        Student, MonthlyJournal.student_id == Student.id
    ).filter(
        Student.user_id == user_id
    ).scalar() or 0

    total_meetings = _count_meetings(user_id)
    meetings_this_week = _count_meetings(user_id, since=week_start)
    meetings_this_month = _count_meetings(user_id, since=month_start)

    assessment_percentage = 0
    if total_students > 0:
        # half-up, round() would give 12 for 12.5
        assessment_percentage = int(students_assessed * 100 / total_students + 0.5)

    return {
        "total_students": total_students,
        "students_assessed": students_assessed,
        "students_not_assessed": total_students - students_assessed,
        "assessment_percentage": assessment_percentage,
        "total_meetings": total_meetings,
        "meetings_this_week": meetings_this_week,
        "meetings_this_month": meetings_this_month,
    }


def _count_meetings(user_id, since=None):

    query = db.session.query(
        func.count(MeetingLog.id)
    ).join(
        Student, MeetingLog.student_id == Student.id
    ).filter(
        Student.user_id == user_id
    )

    if since is not None:
        query = query.filter(MeetingLog.meeting_date >= since)

    return query.scalar() or 0


def _count_per_student(model, user_id):
    """student_id -> number of ``model`` rows for the user's students."""
    rows = db.session.query(
        model.student_id,
        func.count(model.id)
    ).join(
        Student, model.student_id == Student.id
    ).filter(
        Student.user_id == user_id
    ).group_by(
        model.student_id
    ).all()

    return {student_id: count for student_id, count in rows}


def get_record_counts(user_id):
    """Rows owned by the user in every student table, shown before a reset."""
    counts = {
        "students": Student.query.filter_by(user_id=user_id).count(),
    }

    for table, model in (
        ("monthly_journals", MonthlyJournal),
        ("meeting_logs", MeetingLog),
        ("interventions", Intervention),
        ("student_social_usages", StudentSocialUsage),
    ):
        counts[table] = db.session.query(
            func.count(model.id)
        ).join(
            Student, model.student_id == Student.id
        ).filter(
            Student.user_id == user_id
        ).scalar() or 0

    return counts


def get_current_semester(today=None):
    """
    The running semester of the Indonesian school year.

    July to December is "Ganjil" of year/year+1, January to June is "Genap"
    of year-1/year.
    """
    today = today or date.today()

    if today.month >= 7:
        return {
            "semester": "Ganjil",
            "academic_year": f"{today.year}/{today.year + 1}",
            "period_start": date(today.year, 7, 1),
            "period_end": date(today.year, 12, 31),
        }

    return {
        "semester": "Genap",
        "academic_year": f"{today.year - 1}/{today.year}",
        "period_start": date(today.year, 1, 1),
        "period_end": date(today.year, 6, 30),
    }


def get_report_listing(user_id, today=None):

    students = Student.query.filter_by(
        user_id=user_id
    ).order_by(Student.full_name).all()

    journal_counts = _count_per_student(MonthlyJournal, user_id)
    meeting_counts = _count_per_student(MeetingLog, user_id)

    latest_periods = {}
    journals = db.session.query(
        MonthlyJournal.student_id,
        MonthlyJournal.monitoring_period
    ).join(
        Student, MonthlyJournal.student_id == Student.id
    ).filter(
        Student.user_id == user_id
    ).order_by(MonthlyJournal.created_at.desc()).all()

    for student_id, period in journals:
        latest_periods.setdefault(student_id, period)

    individual_reports = []
    for student in students:
        total_journals = journal_counts.get(student.id, 0)
        total_meetings = meeting_counts.get(student.id, 0)

        # students without any records have nothing to report
        if not total_journals and not total_meetings:
            continue

        individual_reports.append({
            "id": student.id,
            "student_id": student.id,
            "student_name": student.full_name,
            "classroom": student.classroom or "-",
            "monitoring_period": latest_periods.get(student.id) or "Semua Periode",
            "total_journals": total_journals,
            "total_meetings": total_meetings,
        })

    semester_reports = []
    if students:
        semester = get_current_semester(today)
        semester_reports.append({
            "id": "semester-current",
            "title": f"Laporan Semester {semester['semester']} {semester['academic_year']}",
            "semester": semester["semester"],
            "academic_year": semester["academic_year"],
            "period_start": semester["period_start"].isoformat(),
            "period_end": semester["period_end"].isoformat(),
            "total_students": len(students),
            "total_journals": sum(journal_counts.values()),
            "total_meetings": sum(meeting_counts.values()),
        })

    return {
        "semester_reports": semester_reports,
        "individual_reports": individual_reports,
    }
