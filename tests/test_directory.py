"""
Projects, agents and builders directories.
"""
import uuid

import pytest

from app.models.project import Project
from tests.conftest import auth_headers


@pytest.fixture
def builder(make_user):
    return make_user("skyline@example.com", user_type="BUILDER", name="Skyline")


@pytest.fixture
def agent(make_user):
    return make_user("agent@example.com", user_type="AGENT", name="Anil Agent")


@pytest.fixture
def make_project(db):
    def _make(builder_user, **fields):
        values = {
            "name": "Skyline Heights",
            "location": "Baner Road",
            "city": "Pune",
            "state": "Maharashtra",
            "status": "ONGOING",
        }
        values.update(fields)
        project = Project(builder_id=builder_user.builder_profile.id, **values)
        db.add(project)
        db.commit()
        db.refresh(project)
        return project
    return _make


class TestProjects:
    def test_filters(self, client, builder, make_project):
        make_project(builder, name="Ongoing in Pune", is_featured=True)
        make_project(builder, name="Done in Mumbai", city="Mumbai", status="COMPLETED")

        assert client.get("/projects").json()["total"] == 2
        featured = client.get("/projects", params={"is_featured": True}).json()["projects"]
        assert [p["name"] for p in featured] == ["Ongoing in Pune"]
        by_city = client.get("/projects", params={"city": "mumbai"}).json()["projects"]
        assert [p["name"] for p in by_city] == ["Done in Mumbai"]
        by_status = client.get("/projects", params={"status": "COMPLETED"}).json()
        assert by_status["total"] == 1

    def test_detail_lists_active_units_cheapest_first(self, client, builder, make_project, make_property):
        project = make_project(builder)
        make_property(builder, project_id=project.id, price=9000000, title="Unit on floor 9")
        make_property(builder, project_id=project.id, price=6000000, title="Unit on floor 2")
        make_property(builder, project_id=project.id, price=1000, title="Unit still pending", status="PENDING")

        data = client.get(f"/projects/{project.id}").json()
        assert [p["price"] for p in data["properties"]] == [6000000, 9000000]
        assert data["builder"]["company_name"] == "Skyline Developers"

    def test_not_found(self, client):
        assert client.get(f"/projects/{uuid.uuid4()}").status_code == 404

    def test_admin_creates_project(self, client, builder, admin_user):
        response = client.post(
            "/admin/projects",
            json={
                "builder_id": str(builder.builder_profile.id),
                "name": "Riverside Towers",
                "location": "Kharadi",
                "city": "Pune",
                "state": "Maharashtra",
            },
            headers=auth_headers(admin_user),
        )
        assert response.status_code == 201
        assert response.json()["status"] == "ONGOING"

    def test_admin_project_needs_builder(self, client, admin_user):
        response = client.post(
            "/admin/projects",
            json={
                "builder_id": str(uuid.uuid4()),
                "name": "Ghost Towers",
                "location": "Nowhere",
                "city": "Pune",
                "state": "Maharashtra",
            },
            headers=auth_headers(admin_user),
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "Builder not found"


class TestAgents:
    def test_list_and_city_filter(self, client, agent, make_user):
        make_user("agent2@example.com", user_type="AGENT", name="Other Agent")
        assert client.get("/agents").json()["total"] == 2
        assert client.get("/agents", params={"city": "MUMBAI"}).json()["total"] == 2
        assert client.get("/agents", params={"city": "Delhi"}).json()["total"] == 0

    def test_inactive_agents_hidden(self, client, make_user):
        make_user("asleep@example.com", user_type="AGENT", is_active=False)
        assert client.get("/agents").json()["total"] == 0

    def test_detail_shows_active_listings(self, client, agent, make_property):
        make_property(agent, title="Agent listing live")
        make_property(agent, title="Agent listing pending", status="PENDING")

        data = client.get(f"/agents/{agent.agent_profile.id}").json()
        assert [p["title"] for p in data["properties"]] == ["Agent listing live"]
        assert data["user"]["name"] == "Anil Agent"

    def test_agent_edits_own_profile(self, client, agent):
        response = client.put(
            "/agents/me", json={"experience_years": 8, "bio": "Western suburbs specialist"},
            headers=auth_headers(agent),
        )
        assert response.status_code == 200
        assert response.json()["experience_years"] == 8

    def test_non_agent_cannot_edit(self, client, user):
        assert client.put("/agents/me", json={"bio": "x"}, headers=auth_headers(user)).status_code == 403


class TestBuilders:
    def test_detail_lists_projects(self, client, builder, make_project):
        make_project(builder, name="Phase one")
        data = client.get(f"/builders/{builder.builder_profile.id}").json()
        assert [p["name"] for p in data["projects"]] == ["Phase one"]

    def test_builder_edits_own_profile(self, client, builder):
        response = client.put("/builders/me", json={"established_year": 1998}, headers=auth_headers(builder))
        assert response.json()["established_year"] == 1998

    def test_non_builder_cannot_edit(self, client, agent):
        assert client.put("/builders/me", json={"city": "Pune"}, headers=auth_headers(agent)).status_code == 403
