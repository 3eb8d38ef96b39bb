from tests.helpers.auth import headers_for
from tests.helpers.factories import create_class, enroll_student


def test_list_classes_returns_student_counts(client, db_session, seeded_users):
    """
    Validate class listing for authenticated users.

    1. Seed two classes and enroll one student.
    2. Call the classes endpoint as a student.
    3. Receive successful response.
    4. Validate names and student counts.
    """
    seven = create_class(db_session, "Class 7", teacher_id=seeded_users["teacher"].id)
    create_class(db_session, "Class 6")
    enroll_student(db_session, seeded_users["student"].id, seven.id)

    response = client.get("/api/v1/classes", headers=headers_for(seeded_users["student"]))
    assert response.status_code == 200
    assert [(item["name"], item["studentCount"]) for item in response.json()] == [("Class 6", 0), ("Class 7", 1)]
    assert response.json()[1]["teacherId"] == seeded_users["teacher"].id


def test_create_class_requires_user_manager(client, seeded_users):
    """
    Validate class creation access and conflicts.

    1. Create a class as admin.
    2. Create the same class again.
    3. Create a class as a teacher.
    4. Validate created, conflict and forbidden statuses.
    """
    payload = {"name": "Class 9", "description": "Grade 9", "teacherId": seeded_users["teacher"].id}
    created = client.post("/api/v1/classes", headers=headers_for(seeded_users["admin"]), json=payload)
    assert created.status_code == 201
    assert created.json()["studentCount"] == 0

    assert client.post("/api/v1/classes", headers=headers_for(seeded_users["admin"]), json=payload).status_code == 409
    assert client.post("/api/v1/classes", headers=headers_for(seeded_users["teacher"]), json=payload).status_code == 403
