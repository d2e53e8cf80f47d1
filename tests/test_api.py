import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dentalchart import models  # noqa: F401
from dentalchart.catalog_data import CATALOG_CODES
from dentalchart.database import Base, get_db
from dentalchart.main import app
from dentalchart.providers.sql import seed_catalog

SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database():
    app.dependency_overrides[get_db] = override_get_db
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        seed_catalog(db, CATALOG_CODES)
    finally:
        db.close()
    yield
    Base.metadata.drop_all(bind=engine)
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def client():
    return TestClient(app)


PATIENTS = "/api/patients/patient-1"


class TestHealthAndTeeth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_molar_info(self, client):
        resp = client.get("/api/teeth/16")
        assert resp.status_code == 200
        data = resp.json()
        assert data["type"] == "molar"
        assert data["quadrant"] == 1
        assert data["is_primary"] is False
        assert "occlusal-4" in data["zones"]

    def test_primary_tooth(self, client):
        resp = client.get("/api/teeth/55")
        assert resp.status_code == 200
        assert resp.json()["is_primary"] is True

    def test_invalid_tooth(self, client):
        assert client.get("/api/teeth/19").status_code == 400
        assert client.get("/api/teeth/abc").status_code == 400


class TestNotationParse:
    def test_filling(self, client):
        resp = client.post("/api/notation/parse", json={"text": "17dob"})
        data = resp.json()
        assert resp.status_code == 200
        assert data["kind"] == "filling"
        assert data["fillings"][0]["surfaces"] == ["distal", "occlusal", "buccal"]
        assert data["fillings"][0]["note"] == "17dob"

    def test_material_shorthand(self, client):
        data = client.post("/api/notation/parse", json={"text": "v93"}).json()
        assert data["kind"] == "material"
        assert data["material"] == "composite"
        assert data["surface_count"] == 3

    def test_tooth_material(self, client):
        data = client.post("/api/notation/parse", json={"text": "26v82"}).json()
        assert data["kind"] == "tooth_material"
        assert data["tooth"] == 26
        assert data["material"] == "glasionomeer"

    def test_direct_code(self, client):
        data = client.post("/api/notation/parse", json={"text": "r24"}).json()
        assert data["kind"] == "direct_code"
        assert data["code"] == "R24"


class TestDentalCodes:
    def test_search(self, client):
        resp = client.get("/api/dental-codes", params={"search": "V9"})
        assert resp.status_code == 200
        codes = [c["code"] for c in resp.json()]
        assert {"V91", "V92", "V93", "V94"} <= set(codes)

    def test_exact_lookup_is_case_insensitive(self, client):
        resp = client.get("/api/dental-codes/v83")
        assert resp.status_code == 200
        assert resp.json()["code"] == "V83"

    def test_unknown_code(self, client):
        resp = client.get("/api/dental-codes/XYZ1")
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Could not find code XYZ1"


class TestNotationProcedures:
    def test_create(self, client):
        resp = client.post(f"{PATIENTS}/procedures/notation", json={"notation": "14dob", "material": "glasionomeer"})
        assert resp.status_code == 201
        procedures = resp.json()["procedures"]
        assert len(procedures) == 1
        assert procedures[0]["code"] == "V83"
        assert procedures[0]["status"] == "PENDING"
        assert procedures[0]["filling_material"] == "glasionomeer"
        assert "interdental-distal" in procedures[0]["sub_surfaces"]

    def test_repeat_returns_same_record(self, client):
        first = client.post(f"{PATIENTS}/procedures/notation", json={"notation": "36o"}).json()
        second = client.post(f"{PATIENTS}/procedures/notation", json={"notation": "36o"}).json()

        assert first["procedures"][0]["id"] == second["procedures"][0]["id"]
        assert len(client.get(f"{PATIENTS}/procedures").json()) == 1

    def test_non_filling_notation(self, client):
        resp = client.post(f"{PATIENTS}/procedures/notation", json={"notation": "v93"})
        assert resp.status_code == 422

    def test_empty_notation(self, client):
        resp = client.post(f"{PATIENTS}/procedures/notation", json={"notation": "  "})
        assert resp.status_code == 422


class TestToolProcedures:
    def test_extraction_with_suturing(self, client):
        resp = client.post(
            f"{PATIENTS}/procedures/tool",
            json={"tool": "extraction", "tooth": 38, "extraction_type": "surgical", "suturing": True},
        )
        assert resp.status_code == 201
        assert [p["code"] for p in resp.json()["procedures"]] == ["H35", "H21", "H26"]

    def test_filling_from_zones(self, client):
        resp = client.post(
            f"{PATIENTS}/procedures/tool",
            json={"tool": "filling", "tooth": 16, "zones": ["occlusal-1", "interdental-mesial"]},
        )
        assert resp.status_code == 201
        assert resp.json()["procedures"][0]["code"] == "V92"

    def test_filling_with_zone_of_another_tooth(self, client):
        resp = client.post(
            f"{PATIENTS}/procedures/tool",
            json={"tool": "filling", "tooth": 24, "zones": ["buccal-1", "bogus"]},
        )
        assert resp.status_code == 400
        assert "buccal-1" in resp.json()["detail"]
        assert client.get(f"{PATIENTS}/procedures").json() == []

    def test_filling_without_zones(self, client):
        resp = client.post(f"{PATIENTS}/procedures/tool", json={"tool": "filling", "tooth": 16})
        assert resp.status_code == 400

    def test_missing_tooth(self, client):
        resp = client.post(f"{PATIENTS}/procedures/tool", json={"tool": "crown"})
        assert resp.status_code == 400

    def test_invalid_tooth(self, client):
        resp = client.post(f"{PATIENTS}/procedures/tool", json={"tool": "crown", "tooth": 19})
        assert resp.status_code == 400

    def test_bridge_tool_is_redirected(self, client):
        resp = client.post(f"{PATIENTS}/procedures/tool", json={"tool": "bridge", "tooth": 14})
        assert resp.status_code == 400

    def test_unknown_scaling_code(self, client):
        resp = client.post(f"{PATIENTS}/procedures/tool", json={"tool": "scaling", "tooth": 31, "scaling_code": "T999"})
        assert resp.status_code == 404

    def test_sealing_multiple_teeth(self, client):
        resp = client.post(f"{PATIENTS}/procedures/tool", json={"tool": "sealing", "teeth": [37, 36]})
        codes = [(p["tooth_number"], p["code"]) for p in resp.json()["procedures"]]
        assert codes == [(36, "V30"), (37, "V35")]


class TestBridgesAndChart:
    def test_bridge_and_chart(self, client):
        client.post(f"{PATIENTS}/procedures/tool", json={"tool": "disabled", "tooth": 15})

        resp = client.post(f"{PATIENTS}/bridges", json={"teeth": [14, 15, 16]})
        assert resp.status_code == 201
        data = resp.json()
        assert data["bridge_type"] == "3-unit bridge"
        assert data["complexity"] == "simple"
        assert sorted(p["code"] for p in data["procedures"]) == ["R24", "R24", "R40"]

        chart = client.get(f"{PATIENTS}/chart").json()
        assert len(chart["bridges"]) == 1
        bridge = chart["bridges"][0]
        assert bridge["bridge_id"] == data["bridge_id"]
        assert bridge["teeth"] == [14, 15, 16]
        assert bridge["roles"] == ["abutment", "pontic", "abutment"]

        teeth = {t["tooth"]: t for t in chart["teeth"]}
        assert teeth[15]["is_disabled"] is False
        assert teeth[14]["whole_tooth"]["is_main_bridge"] is True

    def test_single_tooth_bridge(self, client):
        resp = client.post(f"{PATIENTS}/bridges", json={"teeth": [14]})
        assert resp.status_code == 201
        assert resp.json()["bridge_id"] is None
        assert resp.json()["procedures"] == []

    def test_chart_zones(self, client):
        client.post(f"{PATIENTS}/procedures/notation", json={"notation": "24o"})

        chart = client.get(f"{PATIENTS}/chart").json()

        assert chart["has_snapshot"] is False
        assert chart["teeth"][0]["tooth"] == 24
        assert chart["teeth"][0]["zones"] == {"occlusal": "filling-pending-composite"}

    def test_empty_chart(self, client):
        chart = client.get("/api/patients/nobody/chart").json()
        assert chart["teeth"] == []
        assert chart["bridges"] == []


class TestDeleteProcedure:
    def test_delete(self, client):
        created = client.post(f"{PATIENTS}/procedures/notation", json={"notation": "24o"}).json()
        procedure_id = created["procedures"][0]["id"]

        resp = client.delete(f"{PATIENTS}/procedures/{procedure_id}")

        assert resp.status_code == 200
        assert resp.json() == {"deleted": True, "id": procedure_id, "deleted_ids": [procedure_id]}
        assert client.get(f"{PATIENTS}/procedures").json() == []

    def test_delete_other_patients_procedure(self, client):
        created = client.post(f"{PATIENTS}/procedures/notation", json={"notation": "24o"}).json()
        procedure_id = created["procedures"][0]["id"]

        resp = client.delete(f"/api/patients/patient-2/procedures/{procedure_id}")

        assert resp.status_code == 404
        assert len(client.get(f"{PATIENTS}/procedures").json()) == 1

    def test_delete_bridge_member_removes_bridge(self, client):
        created = client.post(f"{PATIENTS}/bridges", json={"teeth": [14, 15, 16]}).json()
        ids = sorted(p["id"] for p in created["procedures"])

        resp = client.delete(f"{PATIENTS}/procedures/{ids[0]}")

        assert resp.status_code == 200
        assert sorted(resp.json()["deleted_ids"]) == ids
        assert client.get(f"{PATIENTS}/procedures").json() == []
        assert client.get(f"{PATIENTS}/chart").json()["bridges"] == []

    def test_delete_unknown(self, client):
        assert client.delete(f"{PATIENTS}/procedures/missing").status_code == 404
