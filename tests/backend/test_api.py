"""
API 端点测试。

使用 httpx 测试 FastAPI 端点。
"""

import asyncio
import logging
import math

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from waterline.main import app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
async def async_client():
    """异步测试客户端。"""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


SINGLE_WAVE = {
    "waves": [
        {
            "direction": [1.0, 0.0],
            "amplitude": 1.0,
            "wavelength": 2 * math.pi,
            "speed": 1.0,
            "steepness": 0.0,
        }
    ]
}


@pytest.fixture
def session_id(client):
    """创建单组波的会话并返回 ID。"""
    response = client.post("/api/sessions", json={"waves": SINGLE_WAVE})
    assert response.status_code == 201
    yield response.json()["session_id"]
    client.delete(f"/api/sessions/{response.json()['session_id']}")


def test_root(client):
    """测试根路径。"""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Waterline Backend API"
    assert data["version"] == "0.1.0"


def test_health(client):
    """测试健康检查。"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_create_session_defaults(client):
    """测试使用默认配置创建会话。"""
    response = client.post("/api/sessions", json={})
    assert response.status_code == 201

    data = response.json()
    assert data["status"] == "pending"
    assert data["time"] == 0.0
    assert data["body_count"] == 0

    waves = client.get(f"/api/query/{data['session_id']}/waves").json()
    assert len(waves) == 4

    listing = client.get("/api/sessions", params={"status": "pending"}).json()
    assert data["session_id"] in [s["session_id"] for s in listing["sessions"]]

    assert client.delete(f"/api/sessions/{data['session_id']}").status_code == 200
    assert client.get(f"/api/sessions/{data['session_id']}").status_code == 404


def test_create_session_validation(client):
    """测试无效配置返回 422。"""
    response = client.post("/api/sessions", json={"ring": {"capacity": 0}})
    assert response.status_code == 422

    response = client.post("/api/sessions", json={"time": {"dt": 0}})
    assert response.status_code == 422


def test_query_displacement(client, session_id):
    """测试单点位移查询。"""
    response = client.get(
        f"/api/query/{session_id}/displacement",
        params={"x": 0.0, "z": 0.0, "time": math.pi / 2},
    )
    assert response.status_code == 200

    data = response.json()
    assert data["height"] == pytest.approx(1.0)
    assert data["surface_y"] == pytest.approx(1.0)
    assert data["offset_x"] == pytest.approx(0.0, abs=1e-9)


def test_invalid_session_id(client):
    """测试无效的 session_id。"""
    assert client.get("/api/sessions/invalid-id").status_code == 404
    assert client.get("/api/query/invalid-id/events").status_code == 404
    assert client.post("/api/sessions/invalid-id/tick").status_code == 404


def test_update_waves(client, session_id):
    """测试单组修改与整体重配。"""
    response = client.patch(f"/api/sessions/{session_id}/waves/0", json={"amplitude": 0.0})
    assert response.status_code == 200
    assert response.json()["amplitude"] == 0.0

    response = client.patch(f"/api/sessions/{session_id}/waves/3", json={"amplitude": 1.0})
    assert response.status_code == 404

    too_many = {"waves": [{"amplitude": 0.1}, {"amplitude": 0.2}]}
    response = client.put(f"/api/sessions/{session_id}/waves", json=too_many)
    assert response.status_code == 422

    response = client.put(
        f"/api/sessions/{session_id}/waves",
        json={"waves": [{"amplitude": 0.5, "wavelength": math.pi}], "origin": [1.0, 0.0, 0.0]},
    )
    assert response.status_code == 200
    assert response.json()[0]["wavenumber"] == pytest.approx(2.0)


def test_patch_degenerate_wave_logs_warning(client, session_id, caplog):
    """测试单组修改为退化参数时记录警告，且不报错。"""
    with caplog.at_level(logging.WARNING, logger="waterline.services.factory"):
        response = client.patch(
            f"/api/sessions/{session_id}/waves/0",
            json={"wavelength": 0.0, "direction": [0.0, 0.0]},
        )

    assert response.status_code == 200
    assert response.json()["wavenumber"] == 0.0
    assert response.json()["direction"] == [1.0, 0.0]
    messages = [r.getMessage() for r in caplog.records]
    assert any("Wave 0 has a zero direction" in m for m in messages)
    assert any("Wave 0 has wavelength" in m for m in messages)


def test_bodies_and_tick(client, session_id):
    """测试注册浮体、手动步进与浮体状态查询。"""
    body = {
        "body_id": "boat",
        "position": [0.0, -0.5, 0.0],
        "velocity": [0.0, -3.0, 0.0],
        "mass": 50.0,
    }
    response = client.post(f"/api/sessions/{session_id}/bodies", json=body)
    assert response.status_code == 201
    assert response.json()["submerged_fraction"] == 0.0

    response = client.post(f"/api/sessions/{session_id}/bodies", json=body)
    assert response.status_code == 409

    response = client.post(f"/api/sessions/{session_id}/tick", json={"steps": 3})
    assert response.status_code == 200
    data = response.json()
    assert data["steps"] == 3
    assert data["time"] == pytest.approx(0.06)
    assert len(data["interactions"]) == 1
    assert data["interactions"][0]["body_id"] == "boat"

    bodies = client.get(f"/api/query/{session_id}/bodies").json()
    assert len(bodies) == 1
    assert bodies[0]["body_id"] == "boat"
    assert bodies[0]["force"][1] > 0.0

    events = client.get(f"/api/query/{session_id}/events").json()
    assert sum(1 for e in events["events"] if e["active"]) == 1

    response = client.delete(f"/api/sessions/{session_id}/bodies/boat")
    assert response.status_code == 200
    assert response.json()["body_count"] == 0
    assert client.delete(f"/api/sessions/{session_id}/bodies/boat").status_code == 404


def test_external_interaction(client, session_id):
    """测试外部触发交互事件。"""
    snapshot = client.get(f"/api/query/{session_id}/events").json()
    assert snapshot["dirty"]
    assert len(snapshot["events"]) == 2
    assert all(not e["active"] for e in snapshot["events"])

    response = client.post(
        f"/api/sessions/{session_id}/interactions", json={"x": 1.0, "z": 2.0, "radius": 0.5}
    )
    assert response.status_code == 201
    assert response.json()["slot"] == 0

    snapshot = client.get(f"/api/query/{session_id}/events").json()
    event = snapshot["events"][0]
    assert event["active"]
    assert event["x"] == 1.0
    assert event["radius"] == 0.5
    assert event["age"] == 0.0


def test_tick_respects_time_limit(client):
    """测试手动步进在到达 T_total 时结束。"""
    response = client.post("/api/sessions", json={"time": {"dt": 0.01, "T_total": 0.05}})
    session_id = response.json()["session_id"]

    data = client.post(f"/api/sessions/{session_id}/tick", json={"steps": 10}).json()
    assert data["steps"] == 5
    assert data["time"] == pytest.approx(0.05)

    assert client.get(f"/api/sessions/{session_id}").json()["status"] == "completed"
    assert client.post(f"/api/sessions/{session_id}/tick").status_code == 400
    client.delete(f"/api/sessions/{session_id}")


def test_query_surface(client, session_id):
    """测试水面网格查询。"""
    params = {"x_min": 0.0, "z_min": 0.0, "x_max": 4.0, "z_max": 2.0, "dx": 1.0, "dz": 1.0}
    response = client.get(f"/api/query/{session_id}/surface", params=params)
    assert response.status_code == 200

    data = response.json()
    assert len(data["xs"]) == 5
    assert len(data["zs"]) == 3
    assert len(data["heights"]) == 3
    assert len(data["waves"]) == 1

    params["x_max"] = -1.0
    response = client.get(f"/api/query/{session_id}/surface", params=params)
    assert response.status_code == 422


@pytest.mark.anyio
async def test_clock_pause_resume_and_stop(async_client):
    """测试外部时钟的启动、暂停、恢复与停止。"""
    response = await async_client.post(
        "/api/sessions", json={"time": {"dt": 0.01}, "autostart": True}
    )
    assert response.status_code == 201
    assert response.json()["status"] == "running"
    session_id = response.json()["session_id"]

    # 等待后台时钟推进
    await asyncio.sleep(0.1)

    pause_resp = await async_client.post(f"/api/sessions/{session_id}/clock/pause")
    assert pause_resp.status_code == 200
    assert pause_resp.json()["status"] == "paused"
    assert pause_resp.json()["time"] > 0.0

    # 暂停期间不能手动步进
    tick_resp = await async_client.post(f"/api/sessions/{session_id}/tick")
    assert tick_resp.status_code == 409

    resume_resp = await async_client.post(f"/api/sessions/{session_id}/clock/resume")
    assert resume_resp.status_code == 200
    assert resume_resp.json()["status"] == "running"

    stop_resp = await async_client.post(f"/api/sessions/{session_id}/clock/stop")
    assert stop_resp.status_code == 200
    assert stop_resp.json()["status"] == "stopped"

    # 停止后时钟任务退出前，恢复与暂停都被拒绝，状态保持 stopped
    resume_resp = await async_client.post(f"/api/sessions/{session_id}/clock/resume")
    assert resume_resp.status_code == 400
    pause_resp = await async_client.post(f"/api/sessions/{session_id}/clock/pause")
    assert pause_resp.status_code == 400
    status = (await async_client.get(f"/api/sessions/{session_id}")).json()["status"]
    assert status == "stopped"

    await asyncio.sleep(0.05)
    start_resp = await async_client.post(f"/api/sessions/{session_id}/clock/start")
    assert start_resp.status_code == 400

    delete_resp = await async_client.delete(f"/api/sessions/{session_id}")
    assert delete_resp.status_code == 200


@pytest.mark.anyio
async def test_clock_completes_at_time_limit(async_client):
    """测试外部时钟到达 T_total 后自动完成。"""
    response = await async_client.post(
        "/api/sessions",
        json={"time": {"dt": 0.01, "T_total": 0.05}, "autostart": True},
    )
    session_id = response.json()["session_id"]

    for _ in range(50):
        await asyncio.sleep(0.02)
        status = (await async_client.get(f"/api/sessions/{session_id}")).json()["status"]
        if status == "completed":
            break
    else:
        pytest.fail("Session clock did not complete")

    data = (await async_client.get(f"/api/sessions/{session_id}")).json()
    assert data["time"] == pytest.approx(0.05)

    await async_client.delete(f"/api/sessions/{session_id}")
