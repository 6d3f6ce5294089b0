def test_create_section_trims_the_name(admin_client):
    response = admin_client.post("/admin/create-section", json={"name": "  Rizal  ", "grade_level": 7})

    assert response.status_code == 201
    assert response.json()["name"] == "Rizal"


def test_blank_names_are_rejected(admin_client):
    assert admin_client.post("/admin/create-section", json={"name": "   ", "grade_level": 7}).status_code == 422
    assert admin_client.post("/admin/create-partylist", json={"name": ""}).status_code == 422
    assert admin_client.get("/sections").json() == []


def test_section_grade_level_range(admin_client):
    assert admin_client.post("/admin/create-section", json={"name": "A", "grade_level": 6}).status_code == 422
    assert admin_client.post("/admin/create-section", json={"name": "A", "grade_level": 13}).status_code == 422


def test_sections_are_ordered_by_grade_then_name(admin_client):
    for name, grade in [("Narra", 9), ("Acacia", 9), ("Sampaguita", 7)]:
        admin_client.post("/admin/create-section", json={"name": name, "grade_level": grade})

    sections = admin_client.get("/sections").json()
    assert [s["name"] for s in sections] == ["Sampaguita", "Acacia", "Narra"]


def test_edit_and_delete_section(admin_client):
    section = admin_client.post("/admin/create-section", json={"name": "Rizal", "grade_level": 7}).json()

    edited = admin_client.post(
        f"/admin/edit-section/{section['id']}", json={"name": "Mabini", "grade_level": 8}
    )
    assert edited.status_code == 200
    assert edited.json() == {"id": section["id"], "name": "Mabini", "grade_level": 8}

    assert admin_client.post(f"/admin/delete-section/{section['id']}").status_code == 200
    assert admin_client.get(f"/sections/{section['id']}").status_code == 404
    assert admin_client.post(f"/admin/delete-section/{section['id']}").status_code == 404


def test_partylist_defaults_and_duplicates(admin_client):
    response = admin_client.post("/admin/create-partylist", json={"name": "Bagong Lakas", "acronym": " "})
    partylist = response.json()

    assert response.status_code == 201
    assert partylist["color_hex"] == "#3B82F6"
    assert partylist["acronym"] is None
    assert partylist["is_active"] is True

    duplicate = admin_client.post("/admin/create-partylist", json={"name": "Bagong Lakas"})
    assert duplicate.status_code == 409


def test_partylist_color_must_be_hex(admin_client):
    response = admin_client.post("/admin/create-partylist", json={"name": "Red", "color_hex": "red"})
    assert response.status_code == 422


def test_active_only_partylists(admin_client):
    admin_client.post("/admin/create-partylist", json={"name": "Active"})
    admin_client.post("/admin/create-partylist", json={"name": "Retired", "is_active": False})

    assert len(admin_client.get("/partylists").json()) == 2
    assert [p["name"] for p in admin_client.get("/partylists", params={"active_only": True}).json()] == ["Active"]


def test_candidate_target_grade_only_kept_for_representatives(election, admin_client):
    candidates = election["candidates"]

    assert candidates["pres_blue"]["target_grade_level"] is None
    assert candidates["glr9_blue"]["target_grade_level"] == 9
    assert candidates["pres_blue"]["partylist"]["name"] == "Bagong Lakas"

    response = admin_client.post("/admin/create-candidate", json={
        "full_name": "No Grade",
        "position": "Grade Level Representative",
        "partylist_id": election["partylists"]["blue"]["id"],
    })
    assert response.status_code == 422

    response = admin_client.post("/admin/create-candidate", json={
        "full_name": "Grade Seven",
        "position": "Grade Level Representative",
        "partylist_id": election["partylists"]["blue"]["id"],
        "target_grade_level": 7,
    })
    assert response.status_code == 422


def test_candidate_slot_conflict(election, admin_client):
    blue = election["partylists"]["blue"]

    response = admin_client.post("/admin/create-candidate", json={
        "full_name": "Second President",
        "position": "President",
        "partylist_id": blue["id"],
    })

    assert response.status_code == 409
    assert "Bagong Lakas" in response.json()["detail"]
    assert "Andrea Cruz" in response.json()["detail"]
    names = [c["full_name"] for c in admin_client.get("/candidates").json()]
    assert "Second President" not in names


def test_representatives_for_different_grades_do_not_conflict(election, admin_client):
    response = admin_client.post("/admin/create-candidate", json={
        "full_name": "Gio Villa",
        "position": "Grade Level Representative",
        "partylist_id": election["partylists"]["blue"]["id"],
        "target_grade_level": 10,
    })
    assert response.status_code == 201

    conflict = admin_client.post("/admin/create-candidate", json={
        "full_name": "Hana Uy",
        "position": "Grade Level Representative",
        "partylist_id": election["partylists"]["blue"]["id"],
        "target_grade_level": 9,
    })
    assert conflict.status_code == 409
    assert "Grade Level Representative (Grade 9)" in conflict.json()["detail"]


def test_editing_a_candidate_keeps_its_own_slot(election, admin_client):
    candidate = election["candidates"]["pres_blue"]

    response = admin_client.post(f"/admin/edit-candidate/{candidate['id']}", json={
        "full_name": "Andrea C. Cruz",
        "position": "President",
        "partylist_id": candidate["partylist_id"],
    })
    assert response.status_code == 200
    assert response.json()["full_name"] == "Andrea C. Cruz"

    moved = admin_client.post(f"/admin/edit-candidate/{election['candidates']['vp_blue']['id']}", json={
        "full_name": "Carlo Reyes",
        "position": "President",
        "partylist_id": candidate["partylist_id"],
    })
    assert moved.status_code == 409


def test_delete_candidate(election, admin_client):
    candidate = election["candidates"]["vp_blue"]

    assert admin_client.post(f"/admin/delete-candidate/{candidate['id']}").status_code == 200
    assert candidate["id"] not in [c["id"] for c in admin_client.get("/candidates").json()]


def test_deleting_a_partylist_removes_its_candidates(election, admin_client):
    red = election["partylists"]["red"]

    assert admin_client.post(f"/admin/delete-partylist/{red['id']}").status_code == 200

    remaining = admin_client.get("/candidates").json()
    assert all(c["partylist_id"] != red["id"] for c in remaining)
    assert len(remaining) == 3


def test_candidates_by_partylist(election, admin_client):
    panel = admin_client.get("/admin/candidates-by-partylist").json()
    by_name = {entry["partylist"]["name"]: entry for entry in panel}

    blue = by_name["Bagong Lakas"]
    assert blue["total"] == 3
    assert [c["full_name"] for c in blue["positions"]["President"]] == ["Andrea Cruz"]
    assert by_name["Tinig ng Kabataan"]["total"] == 3


def test_student_roster(election, admin_client):
    roster = admin_client.get("/admin/students").json()

    assert [s["full_name"] for s in roster] == ["Jose Rizal", "Juan Dela Cruz", "Maria Clara"]
    assert roster[0]["section"]["name"] == "Narra"
    assert not any(s["has_voted"] for s in roster)


def test_deletions_are_logged(election, admin_client):
    candidate = election["candidates"]["vp_blue"]
    admin_client.post(f"/admin/delete-candidate/{candidate['id']}")

    logs = admin_client.get("/admin/logs", params={"event": "candidate_deleted"}).json()
    assert len(logs) == 1
    assert logs[0]["event_params"] == {"candidate_id": candidate["id"], "name": "Carlo Reyes"}


def test_logs_reject_unknown_events(admin_client):
    response = admin_client.get("/admin/logs", params={"event": "made_up"})
    assert response.status_code == 400

    assert admin_client.get("/admin/logs", params={"event": "ballot_cast"}).json() == []
