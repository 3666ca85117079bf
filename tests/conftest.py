import pytest

from guruwali import create_app
from guruwali.config import TestingConfig
from guruwali.extensions import db
from guruwali.models import Student
from guruwali.seeds import create_user


@pytest.fixture
def app(tmp_path):
    app = create_app(TestingConfig, {
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'guruwali-test.db'}",
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
    })

    yield app

    with app.app_context():
        db.session.remove()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def teacher(app):
    with app.app_context():
        user = create_user("guru@sekolah.id", "password123", "Ibu Siti Rahayu")
        return {"id": user.id, "email": user.email, "password": "password123"}


@pytest.fixture
def auth_client(client, teacher):
    response = client.post("/api/auth/login", json={
        "email": teacher["email"],
        "password": teacher["password"],
    })
    assert response.status_code == 200
    return client


@pytest.fixture
def student_id(auth_client):
    response = auth_client.post("/api/students", json={
        "full_name": "Arya Kusuma",
        "classroom": "7A",
        "gender": "L",
        "social_usages": [
            {"platform": "Instagram", "username": "arya.id", "is_active": True},
            {"platform": "TikTok", "username": "@arya", "is_active": False},
        ],
    })
    assert response.status_code == 201
    return response.get_json()["student"]["id"]


@pytest.fixture
def foreign_student_id(app):
    """A student owned by a different teacher."""
    with app.app_context():
        other = create_user("guru.lain@sekolah.id", "password123", "Pak Budi")
        student = Student(user_id=other.id, full_name="Siswa Lain")
        db.session.add(student)
        db.session.commit()
        return student.id
