"""API tests for the transpose and song endpoints (in-memory SQLite)."""

from fastapi.testclient import TestClient

DOC = '<div>\n<pre data-key="C"><span class="c" title="">G</span>Amazing grace</pre>\n</div>'


def test_health(client: TestClient) -> None:
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_keys_lists_supported_and_unmodeled(client: TestClient) -> None:
    body = client.get("/keys").json()
    assert body["major_keys"] == ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "Bb", "B"]
    assert body["minor_keys"] == ["Cm", "Dm", "Em", "Fm", "Gm", "Am", "Bm"]
    assert "F#m" in body["unmodeled_minor_keys"]
    assert body["transpose_options"][0] == {"label": "Original", "value": 0}
    assert body["available_chords"][1] == {"label": "C#/Db", "value": "C#"}


def test_transpose_chord(client: TestClient) -> None:
    resp = client.post("/transpose/chord", json={"chord": "D/F#", "from_key": "C", "to_key": "G"})
    assert resp.status_code == 200
    assert resp.json()["transposed"] == "A/C#"


def test_transpose_chord_rejects_blank_key(client: TestClient) -> None:
    resp = client.post("/transpose/chord", json={"chord": "G", "from_key": " ", "to_key": "D"})
    assert resp.status_code == 422


def test_transpose_markup(client: TestClient) -> None:
    resp = client.post("/transpose/markup", json={"document": DOC, "from_key": "C", "to_key": "D"})
    body = resp.json()
    assert resp.status_code == 200
    assert body["supported"] is True
    assert body["document"] == DOC.replace('"C"', '"D"').replace(">G<", ">A<")


def test_transpose_markup_unsupported_key(client: TestClient) -> None:
    resp = client.post("/transpose/markup", json={"document": DOC, "from_key": "C", "to_key": "G#m"})
    body = resp.json()
    assert body["supported"] is False
    assert body["document"] == DOC


def test_transpose_markup_hide_chords(client: TestClient) -> None:
    resp = client.post(
        "/transpose/markup",
        json={"document": DOC, "from_key": "C", "to_key": "D", "show_chords": False},
    )
    assert resp.json()["document"] == '<div>\n<pre data-key="D">Amazing grace</pre>\n</div>'


def test_transpose_semitones(client: TestClient) -> None:
    resp = client.post(
        "/transpose/semitones",
        json={"markup": "C Am F G", "chords": ["C", "Am", "F", "G"], "semitones": 2},
    )
    assert resp.status_code == 200
    assert resp.json()["markup"] == "D Bm G A"


def test_transpose_semitones_out_of_range(client: TestClient) -> None:
    resp = client.post("/transpose/semitones", json={"markup": "C", "chords": ["C"], "semitones": 12})
    assert resp.status_code == 422


def test_create_song_from_plain_text_and_view(client: TestClient) -> None:
    resp = client.post(
        "/songs",
        json={"title": "Amazing Grace", "plain_text": "G\nAmazing grace", "base_chord": "C"},
    )
    assert resp.status_code == 200
    song = resp.json()
    assert song["base_chord"] == "C"
    assert '<span class="c" title="">G</span>' in song["lyrics_and_chords"]

    fetched = client.get(f"/songs/{song['id']}").json()
    assert fetched["title"] == "Amazing Grace"

    view = client.get(f"/songs/{song['id']}/view", params={"key": "D"}).json()
    assert view["key"] == "D"
    assert '<pre data-key="D">' in view["content"]
    assert '<span class="c" title="">A</span>' in view["content"]


def test_view_defaults_to_base_key(client: TestClient) -> None:
    song = client.post("/songs", json={"title": "Stored", "lyrics_and_chords": DOC}).json()
    assert song["base_chord"] == "C"

    view = client.get(f"/songs/{song['id']}/view").json()
    assert view["key"] == "C"
    assert view["content"] == DOC


def test_view_hides_chords(client: TestClient) -> None:
    song = client.post("/songs", json={"title": "Stored", "lyrics_and_chords": DOC}).json()
    view = client.get(
        f"/songs/{song['id']}/view", params={"key": "G", "show_chords": "false"}
    ).json()
    assert view["show_chords"] is False
    assert 'class="c"' not in view["content"]
    assert "Amazing grace" in view["content"]


def test_view_unsupported_key_reports_stored_key(client: TestClient) -> None:
    song = client.post("/songs", json={"title": "Stored", "lyrics_and_chords": DOC}).json()
    view = client.get(f"/songs/{song['id']}/view", params={"key": "F#m"}).json()
    assert view["requested_key"] == "F#m"
    assert view["key"] == "C"
    assert view["supported"] is False
    assert view["content"] == DOC


def test_song_not_found(client: TestClient) -> None:
    assert client.get("/songs/missing").status_code == 404
    assert client.get("/songs/missing/view").status_code == 404


def test_create_song_rejects_two_content_sources(client: TestClient) -> None:
    resp = client.post(
        "/songs",
        json={"title": "Both", "plain_text": "G", "lyrics_and_chords": DOC},
    )
    assert resp.status_code == 422


def test_parse_song(client: TestClient) -> None:
    resp = client.post("/songs/parse", json={"text": "C   G\nHello world"})
    body = resp.json()
    assert body["lyrics"] == "Hello world"
    assert body["chords"] == ["C", "G"]


def test_transpose_semitones_from_key_pair(client: TestClient) -> None:
    resp = client.post(
        "/transpose/semitones",
        json={"markup": "C G", "chords": ["C", "G"], "from_key": "C", "to_key": "Bb"},
    )
    body = resp.json()
    assert body["semitones"] == -2
    assert body["markup"] == "Bb F"


def test_transpose_semitones_requires_interval(client: TestClient) -> None:
    resp = client.post("/transpose/semitones", json={"markup": "C", "chords": ["C"]})
    assert resp.status_code == 422
