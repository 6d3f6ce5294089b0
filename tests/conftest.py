import os
import tempfile

import pytest

_tmp_dir = tempfile.mkdtemp(prefix="sslg-tests-")

os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(_tmp_dir, "sslg.db")
os.environ["USE_ASYNC_ENGINE"] = "0"
os.environ["LOG_PATH"] = os.path.join(_tmp_dir, "sslg.log")
os.environ["LOG_LEVEL"] = "warning"
os.environ["ADMIN_PIN"] = "admin-pin"
os.environ["FACILITATOR_PIN"] = "facilitator-pin"

from fastapi.testclient import TestClient  # noqa: E402

from app.database import Base, engine  # noqa: E402
from app.main import app  # noqa: E402
from app.sslg.model import models  # noqa: E402, F401
from app.sslg.realtime import broker  # noqa: E402

ADMIN_PIN = os.environ["ADMIN_PIN"]
FACILITATOR_PIN = os.environ["FACILITATOR_PIN"]


@pytest.fixture(autouse=True)
def database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    broker.subscriptions.clear()
    yield
    broker.subscriptions.clear()


@pytest.fixture
def client():
    with TestClient(app) as client:
        yield client


@pytest.fixture
def admin_client(client):
    response = client.post("/admin/unlock", json={"pin": ADMIN_PIN})
    assert response.status_code == 200
    return client


@pytest.fixture
def election(admin_client):
    """
    Two grade 8 and grade 9 sections, two partylists and a full candidate
    list including Grade Level Representatives for grades 9 and 10.
    """

    def post(url, payload):
        response = admin_client.post(url, json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    grade_8 = post("/admin/create-section", {"name": "Sampaguita", "grade_level": 8})
    grade_9 = post("/admin/create-section", {"name": "Narra", "grade_level": 9})

    blue = post("/admin/create-partylist", {"name": "Bagong Lakas", "acronym": "BL"})
    red = post("/admin/create-partylist", {"name": "Tinig ng Kabataan", "color_hex": "#EF4444"})

    def candidate(name, partylist, position, target=None):
        return post("/admin/create-candidate", {
            "full_name": name,
            "position": position,
            "partylist_id": partylist["id"],
            "target_grade_level": target,
        })

    candidates = {
        "pres_blue": candidate("Andrea Cruz", blue, "President"),
        "pres_red": candidate("Bea Santos", red, "President"),
        "vp_blue": candidate("Carlo Reyes", blue, "Vice-President"),
        "glr9_blue": candidate("Dan Lim", blue, "Grade Level Representative", 9),
        "glr9_red": candidate("Ella Tan", red, "Grade Level Representative", 9),
        "glr10_red": candidate("Fe Ramos", red, "Grade Level Representative", 10),
    }

    students = {}
    for key, section, name in [
        ("juan", grade_8, "Juan Dela Cruz"),
        ("maria", grade_8, "Maria Clara"),
        ("jose", grade_9, "Jose Rizal"),
    ]:
        students[key] = post(f"/facilitator/{section['id']}/create-student", {"full_name": name})

    return {
        "sections": {"grade_8": grade_8, "grade_9": grade_9},
        "partylists": {"blue": blue, "red": red},
        "candidates": candidates,
        "students": students,
    }
