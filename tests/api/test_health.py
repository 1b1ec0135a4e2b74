"""Welcome & Health - root greeting and liveness probe."""

from student_api import __version__


async def test_root_returns_plain_text_welcome(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/plain")
    assert res.text == "Welcome to the Student API!"


async def test_health_reports_env_and_version(client):
    res = await client.get("/api/health")
    assert res.status_code == 200
    assert res.json() == {
        "status": "success",
        "status_code": 200,
        "data": {"status": "healthy", "env": "test", "version": __version__},
    }


async def test_unknown_route_returns_404_envelope(client):
    res = await client.get("/api/courses")
    assert res.status_code == 404
    assert res.json() == {"status": "error", "status_code": 404, "data": "Not Found"}
