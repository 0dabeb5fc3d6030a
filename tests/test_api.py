import pytest
from fastapi.testclient import TestClient

from signal_normalizer.config import Settings, get_settings
from signal_normalizer.main import app

client = TestClient(app)

EXAMPLE = b"freq,power\n100.0,-50.5\n100.1,-48.2\n100.2,-52.0\n"
# the first column is mostly "n/a", so only one numeric column qualifies
AMBIGUOUS = b"a,b\n100,-50\nn/a,-51\nn/a,-52\n103,-53\nn/a,-54\n"


def _post(path, raw, name="capture.csv", **data):
    files = {"file": (name, raw, "text/csv")}
    return client.post(path, files=files, data={k: str(v) for k, v in data.items()})


@pytest.fixture()
def small_upload_limit():
    app.dependency_overrides[get_settings] = lambda: Settings(max_upload_bytes=16)
    yield
    app.dependency_overrides.pop(get_settings, None)


def test_rejects_unsupported_extension():
    r = _post("/analyze", EXAMPLE, name="capture.bin")
    assert r.status_code == 422


def test_txt_files_accepted():
    r = _post("/analyze", EXAMPLE, name="capture.TXT")
    assert r.status_code == 200
    assert r.json()["pointCount"] == 3


def test_column_detection_error_payload():
    r = _post("/analyze", AMBIGUOUS)
    assert r.status_code == 422

    body = r.json()
    assert body["kind"] == "column_detection"
    assert body["headers"] == ["a", "b"]
    assert body["sampleData"][0] == ["100", "-50"]
    assert len(body["sampleData"]) == 5


def test_manual_mapping_retry():
    r = _post("/analyze", AMBIGUOUS, freq_index=0, power_index=1)
    assert r.status_code == 200

    data = r.json()
    assert data["pointCount"] == 2
    assert data["rowCount"] == 5
    assert data["stats"]["frequency"] == {"min": 100.0, "max": 103.0}


def test_single_manual_index_is_ignored():
    r = _post("/analyze", EXAMPLE, power_index=0)
    assert r.status_code == 200
    assert r.json()["powerIndex"] == 1


def test_negative_manual_index_rejected():
    r = _post("/analyze", EXAMPLE, freq_index=-1, power_index=1)
    assert r.status_code == 422


def test_no_valid_data_error():
    r = _post("/analyze", b"freq,power\nabc,def\n")
    assert r.status_code == 422
    assert r.json()["kind"] == "no_valid_data"
    assert "headers" not in r.json()


def test_empty_upload():
    r = _post("/analyze", b"")
    assert r.status_code == 422
    assert r.json()["kind"] == "unreadable"


def test_blank_upload_is_empty():
    r = _post("/analyze", b"  \n\n")
    assert r.status_code == 422
    assert r.json() == {"kind": "empty", "message": "File must contain at least one data row."}


def test_delimiter_mode_form_field():
    r = _post("/analyze", b"100.0, -50.5\n100.1; -48.2\n", delimiter_mode="simple")
    assert r.status_code == 200
    assert r.json()["delimiter"] == "simple"


def test_byte_range_segment():
    header_and_two_rows = len(b"freq,power\n100.0,-50.5\n100.1,-48.2\n")
    r = _post("/analyze", EXAMPLE, start=0, end=header_and_two_rows)
    assert r.status_code == 200

    data = r.json()
    assert data["fileName"] == "File Segment"
    assert data["rowCount"] == 2


def test_invalid_byte_range():
    r = _post("/analyze", EXAMPLE, start=10, end=5)
    assert r.status_code == 422


def test_upload_limit(small_upload_limit):
    r = _post("/analyze", EXAMPLE)
    assert r.status_code == 413


def test_segment_of_oversized_upload_is_accepted(small_upload_limit):
    raw = b"freq,power\n1,-2\n2,-3\n3,-4\n"
    segment = len(b"freq,power\n1,-2\n")
    assert segment == 16 < len(raw)

    r = _post("/analyze", raw, start=0, end=segment)
    assert r.status_code == 200
    assert r.json()["rowCount"] == 1


def test_oversized_segment_is_rejected(small_upload_limit):
    raw = b"freq,power\n1,-2\n2,-3\n3,-4\n"
    assert _post("/analyze", raw, start=0, end=20).status_code == 413
    assert _post("/analyze", raw, start=5).status_code == 413


def test_fft_endpoint():
    raw = b"freq,power\n1,1\n2,1\n3,1\n4,1\n"
    r = _post("/fft", raw)
    assert r.status_code == 200
    bins = r.json()["bins"]
    assert [b["quefrency"] for b in bins] == [0, 1]
    assert bins[0]["magnitude"] == pytest.approx(4.0)
    assert bins[1]["magnitude"] == pytest.approx(0.0)


def test_fft_endpoint_with_frequency_window():
    raw = b"freq,power\n1,1\n2,1\n3,1\n4,1\n"
    r = _post("/fft", raw, min_freq=3)
    assert r.status_code == 200
    assert r.json()["bins"] == [{"quefrency": 0, "magnitude": pytest.approx(2.0)}]


def test_fft_endpoint_propagates_detection_errors():
    r = _post("/fft", AMBIGUOUS)
    assert r.status_code == 422
    assert r.json()["kind"] == "column_detection"
