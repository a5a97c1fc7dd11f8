from fastapi.testclient import TestClient

from snow_cat.api import app

client = TestClient(app)


def _forecast(days=5, *, snow_hour_mm=0.0, day_max=-5.0):
    hourly = [
        {
            "dt": 1700000000 + i * 3600,
            "temp": -6.0,
            "pop": 0.2,
            "weather": [{"id": 804, "main": "Clouds"}],
            **({"snow": {"1h": snow_hour_mm}} if snow_hour_mm else {}),
        }
        for i in range(days * 24)
    ]
    daily = [
        {
            "temp": {"min": -10.0, "max": day_max},
            "uvi": 2.0,
            "humidity": 70,
            "wind_speed": 4.0,
            "weather": [{"id": 804, "description": "overcast clouds"}],
        }
        for _ in range(days)
    ]
    return {"hourly": hourly, "daily": daily}


def test_health():
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_mood_for_snowy_forecast():
    response = client.post("/mood", json={"forecast": _forecast(snow_hour_mm=0.5), "offset": 0})

    assert response.status_code == 200
    body = response.json()
    assert body["mood"] == "jumping"
    assert body["offset"] == 0
    assert body["signals"]["snow48h_mm"] == 24.0
    assert body["signals"]["warm3d_count"] == 0
    assert body["rationale"]


def test_mood_defaults_to_today():
    response = client.post("/mood", json={"forecast": _forecast()})

    assert response.status_code == 200
    assert response.json()["mood"] == "carving"
    assert response.json()["offset"] == 0


def test_offset_beyond_forecast_is_rejected():
    response = client.post("/mood", json={"forecast": _forecast(days=3), "offset": 3})

    assert response.status_code == 422


def test_negative_offset_is_rejected():
    response = client.post("/mood", json={"forecast": _forecast(), "offset": -1})

    assert response.status_code == 422


def test_missing_daily_is_rejected():
    forecast = _forecast()
    del forecast["daily"]

    response = client.post("/mood", json={"forecast": forecast})

    assert response.status_code == 422


def test_empty_daily_is_rejected():
    response = client.post("/mood", json={"forecast": {"hourly": [], "daily": []}})

    assert response.status_code == 422


def test_outlook_covers_every_day():
    response = client.post("/mood/outlook", json={"forecast": _forecast(days=4, day_max=8.0)})

    assert response.status_code == 200
    moods = response.json()["moods"]
    assert [entry["offset"] for entry in moods] == [0, 1, 2, 3]
    # Warm days with no new snow.
    assert moods[0]["mood"] == "sitting"


def test_hourly_entries_without_timestamp_are_accepted():
    forecast = _forecast()
    for hour in forecast["hourly"]:
        del hour["dt"]
    forecast["hourly"][0]["snow"] = {"1h": 16.0}

    response = client.post("/mood", json={"forecast": forecast})

    assert response.status_code == 200
    assert response.json()["mood"] == "jumping"
    assert response.json()["signals"]["snow48h_mm"] == 16.0


def test_null_or_missing_temp_and_weather_count_as_zero():
    forecast = _forecast(days=3)
    forecast["daily"][0]["temp"] = None
    forecast["daily"][0]["weather"] = None
    del forecast["daily"][1]["temp"]
    del forecast["daily"][1]["weather"]
    forecast["hourly"][5]["weather"] = None

    response = client.post("/mood", json={"forecast": forecast})

    assert response.status_code == 200
    body = response.json()
    assert body["mood"] == "carving"
    assert body["signals"]["today_max_c"] is None
    assert body["signals"]["warm3d_count"] == 0
    assert body["signals"]["sun3d_count"] == 0
