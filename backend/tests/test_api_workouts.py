import httpx

from app.api.deps import get_extraction_service, get_workout_store
from app.services.adapter import AIProviderError
from app.services.ingest import CSV_TEMPLATE

from conftest import CannedResponseAdapter

NEW_WORKOUT = {
    "personName": "Kyle",
    "workoutType": "Activity",
    "startTime": "17:00",
    "endTime": "18:30",
    "date": "2024-01-18",
    "name": "Basketball",
}


def csv_file(text, filename="workouts.csv"):
    return {"file": (filename, text.encode("utf-8"), "text/csv")}


def test_health(demo_client):
    response = demo_client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_list_workouts_from_sheet(client):
    response = client.get("/api/workouts")

    assert response.status_code == 200
    body = response.json()
    assert [w["personName"] for w in body] == ["Greg", "Cortese"]
    assert body[0]["id"] == "2"
    assert body[0]["dayOfWeek"] == "Monday"
    assert body[0]["startTime"] == "09:00"


def test_list_workouts_demo_mode(demo_client):
    body = demo_client.get("/api/workouts").json()
    assert len(body) == 16
    assert body[0]["id"] == "demo-1"


def test_list_workouts_falls_back_to_demo_on_failure(failing_client):
    response = failing_client.get("/api/workouts")
    assert response.status_code == 200
    assert len(response.json()) == 16


def test_add_workout_derives_duration(client, worksheet):
    response = client.post("/api/workouts/add", json=NEW_WORKOUT)

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert worksheet.appended == [
        ["Thursday", "Kyle", "Activity", 90, "2024-01-18", "Basketball", "17:00", "18:30"]
    ]


def test_add_workout_demo_mode(demo_client):
    response = demo_client.post("/api/workouts/add", json=NEW_WORKOUT)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Demo mode: Workout would be added to Google Sheets",
    }


def test_add_workout_rejects_overnight_range(client, worksheet):
    payload = dict(NEW_WORKOUT, startTime="23:30", endTime="00:15")

    response = client.post("/api/workouts/add", json=payload)

    assert response.status_code == 422
    assert worksheet.appended == []


def test_add_workout_requires_duration_without_times(client):
    payload = {"personName": "Kyle", "workoutType": "Gym", "date": "2024-01-18"}
    assert client.post("/api/workouts/add", json=payload).status_code == 422

    payload["duration"] = "1:05"
    assert client.post("/api/workouts/add", json=payload).status_code == 200


def test_add_workout_store_failure(failing_client):
    response = failing_client.post("/api/workouts/add", json=NEW_WORKOUT)
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to add workout"


def test_google_sheets_diagnostic(client):
    body = client.get("/api/workouts/google-sheets").json()

    assert body["success"] is True
    assert body["message"] == "Loaded 2 workouts from Google Sheets"
    assert body["debug"]["totalWorkouts"] == 2
    assert body["debug"]["firstWorkout"]["personName"] == "Greg"


def test_google_sheets_diagnostic_explains_failure(failing_client):
    response = failing_client.get("/api/workouts/google-sheets")

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Permission denied - make sure you shared the sheet with your service account"


def test_update_workout(client, worksheet):
    response = client.put("/api/workouts/3", json={"duration": 35, "name": "Evening HIIT"})

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert worksheet.rows[2] == ["Monday", "Cortese", "HIIT", 35, "2024-01-15", "Evening HIIT", "18:00", "18:30"]


def test_update_missing_workout(client):
    response = client.put("/api/workouts/40", json={"duration": 35})
    assert response.status_code == 404
    assert response.json()["detail"] == "Workout not found"


def test_update_invalid_id(client):
    response = client.put("/api/workouts/abc", json={"duration": 35})
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to update workout"


def test_update_and_delete_demo_mode(demo_client):
    update = demo_client.put("/api/workouts/demo-1", json={"duration": 35})
    delete = demo_client.delete("/api/workouts/demo-1")

    assert update.json() == {"success": True, "message": "Demo mode: Workout update simulated"}
    assert delete.json() == {"success": True, "message": "Demo mode: Workout deletion simulated"}


def test_delete_workout(client, worksheet):
    response = client.delete("/api/workouts/2")

    assert response.status_code == 200
    assert [row[1] for row in worksheet.rows[1:]] == ["Cortese"]


def test_delete_workout_failure(failing_client):
    response = failing_client.delete("/api/workouts/2")
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to delete workout"


def test_csv_template_download(demo_client):
    response = demo_client.get("/api/workouts/csv/template")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="workout_template.csv"' in response.headers["content-disposition"]
    assert response.text == CSV_TEMPLATE


def test_csv_preview(demo_client):
    text = CSV_TEMPLATE + "Bob,Yoga,09:00,09:45,45,2024-01-15\n"

    response = demo_client.post("/api/workouts/csv/preview", files=csv_file(text))

    assert response.status_code == 200
    body = response.json()
    assert (body["total"], body["valid"], body["invalid"]) == (5, 4, 1)
    assert body["message"] == "Processed 5 rows: 4 valid, 1 invalid"
    bad = body["rows"][-1]
    assert bad["isValid"] is False
    assert bad["rowNumber"] == 6
    assert bad["errors"] == ["Invalid person name: Bob", "Invalid workout type: Yoga"]


def test_csv_preview_handles_byte_order_mark(demo_client):
    response = demo_client.post("/api/workouts/csv/preview", files=csv_file("\ufeff" + CSV_TEMPLATE))
    assert response.status_code == 200
    assert response.json()["valid"] == 4


def test_csv_preview_rejects_missing_columns(demo_client):
    response = demo_client.post("/api/workouts/csv/preview", files=csv_file("personName,date\nGreg,2024-01-15\n"))
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Missing required columns: workoutType")


def test_csv_upload(client, worksheet):
    text = CSV_TEMPLATE + "Bob,Gym,09:00,09:45,45,2024-01-15\n"

    response = client.post("/api/workouts/csv/upload", files=csv_file(text))

    assert response.status_code == 200
    assert response.json() == {
        "successCount": 4,
        "errorCount": 0,
        "invalidCount": 1,
        "failedRows": [],
        "message": "Successfully uploaded 4 workouts!",
    }
    assert len(worksheet.appended) == 4


def test_csv_upload_demo_mode(demo_client):
    response = demo_client.post("/api/workouts/csv/upload", files=csv_file(CSV_TEMPLATE))
    assert response.json()["message"] == "Demo mode: 4 workouts would be added to Google Sheets"


def test_csv_upload_without_valid_rows(client, worksheet):
    text = "personName,workoutType,startTime,endTime,duration,date\nBob,Gym,09:00,09:45,45,2024-01-15\n"

    response = client.post("/api/workouts/csv/upload", files=csv_file(text))

    assert response.status_code == 400
    assert response.json()["detail"] == "No valid workouts to upload"
    assert worksheet.appended == []


def test_process_image(extraction_client):
    client, adapter = extraction_client(
        '{"workoutType": "Gym", "startTime": "06:30", "endTime": "07:15", '
        '"date": "2024-01-15", "confidence": 0.8, "extractedText": "Strength 45 min"}'
    )

    response = client.post(
        "/api/workouts/process-image",
        files={"image": ("whoop.png", b"\x89PNG data", "image/png")},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["workoutData"]["workoutType"] == "Gym"
    assert body["workoutData"]["duration"] == 45
    assert body["workoutData"]["confidence"] == 0.8
    assert len(adapter.calls) == 1


def test_process_image_rejects_non_images(extraction_client):
    client, adapter = extraction_client("{}")

    response = client.post(
        "/api/workouts/process-image",
        files={"image": ("notes.txt", b"hello", "text/plain")},
    )

    assert response.json() == {"success": False, "workoutData": None, "error": "Please upload an image file"}
    assert adapter.calls == []


def test_process_image_provider_failure(extraction_client):
    client, _ = extraction_client(error=AIProviderError("AI request timed out, please try again"))

    response = client.post(
        "/api/workouts/process-image",
        files={"image": ("photo.jpg", b"jpeg", "image/jpeg")},
    )

    body = response.json()
    assert body["success"] is False
    assert body["error"] == "AI request timed out, please try again"


def test_process_image_without_ai_configured(api, demo_client):
    api.dependency_overrides[get_extraction_service] = lambda: None

    response = demo_client.post(
        "/api/workouts/process-image",
        files={"image": ("photo.jpg", b"jpeg", "image/jpeg")},
    )

    assert response.json()["success"] is False
    assert response.json()["error"] == "AI image processing is not configured"


def test_add_workout_rejects_unreadable_duration(client, worksheet):
    payload = {"personName": "Kyle", "workoutType": "Gym", "date": "2024-01-18", "duration": "abc"}

    response = client.post("/api/workouts/add", json=payload)

    assert response.status_code == 422
    assert worksheet.appended == []


def test_update_rejects_invalid_fields(client, worksheet):
    before = list(worksheet.rows[1])

    response = client.put(
        "/api/workouts/2",
        json={"date": "not-a-date", "startTime": "25:99", "endTime": "08:00"},
    )

    assert response.status_code == 422
    assert worksheet.rows[1] == before


def test_update_rejects_end_before_start(client, worksheet):
    response = client.put("/api/workouts/2", json={"endTime": "08:00"})

    assert response.status_code == 422
    assert worksheet.rows[1][7] == "09:45"


def test_update_rejects_unreadable_duration(client):
    response = client.put("/api/workouts/2", json={"duration": "abc"})
    assert response.status_code == 422


def test_update_null_duration_is_derived_from_times(client, worksheet):
    worksheet.rows[1][3] = "50"

    response = client.put("/api/workouts/2", json={"duration": None})

    assert response.status_code == 200
    assert worksheet.rows[1][3] == 45


def test_update_null_required_fields_are_rejected(client, worksheet):
    before = list(worksheet.rows[1])

    no_duration = client.put(
        "/api/workouts/2",
        json={"startTime": None, "endTime": None, "duration": None},
    )
    no_person = client.put("/api/workouts/2", json={"personName": None})

    assert no_duration.status_code == 422
    assert no_person.status_code == 422
    assert worksheet.rows[1] == before


def test_process_image_unreadable_ai_response(extraction_client):
    adapter = CannedResponseAdapter(httpx.Response(200, text="<html>gateway</html>"))
    client, _ = extraction_client(adapter=adapter)

    response = client.post(
        "/api/workouts/process-image",
        files={"image": ("photo.jpg", b"jpeg", "image/jpeg")},
    )

    assert response.status_code == 200
    assert response.json() == {
        "success": False,
        "workoutData": None,
        "error": "AI response could not be read, please try again",
    }


def test_process_image_empty_ai_answer(extraction_client):
    adapter = CannedResponseAdapter(httpx.Response(200, json={"choices": []}))
    client, _ = extraction_client(adapter=adapter)

    response = client.post(
        "/api/workouts/process-image",
        files={"image": ("photo.jpg", b"jpeg", "image/jpeg")},
    )

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["error"] == "Could not read workout details from the AI response"


def test_workout_store_dependency_is_reused():
    get_workout_store.cache_clear()
    try:
        assert get_workout_store() is get_workout_store()
    finally:
        get_workout_store.cache_clear()
