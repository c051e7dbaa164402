"""Server-rendered pages: routing, forms, and error surfacing."""

from cloudnotes.config import get_settings

COOKIE = get_settings().session_cookie_name


def get(client, path, **kwargs):
    return client.get(path, follow_redirects=False, **kwargs)


def post(client, path, data=None):
    return client.post(path, data=data or {}, follow_redirects=False)


class TestRouting:
    def test_signed_out_pages_redirect_to_login(self, client):
        client.cookies.clear()

        for path in ("/dashboard", "/admin"):
            resp = get(client, path)
            assert resp.status_code == 303
            assert resp.headers["location"] == "/login"

    def test_root_goes_to_dashboard(self, client):
        resp = get(client, "/")

        assert resp.status_code == 303
        assert resp.headers["location"] == "/dashboard"

    def test_non_admin_is_redirected_away_from_admin(self, client, api, user_token):
        api.login("alice@example.com")

        for path in ("/admin", "/admin?visibility=public", "/admin?q=anything"):
            resp = get(client, path)
            assert resp.status_code == 303
            assert resp.headers["location"] == "/dashboard"

        resp = post(client, "/admin/notes/00000000-0000-0000-0000-000000000000/delete", {"confirm": "yes"})
        assert resp.status_code == 303
        assert resp.headers["location"] == "/dashboard"

    def test_signed_in_login_page_goes_to_dashboard(self, client, user_token):
        resp = get(client, "/login")

        assert resp.status_code == 303
        assert resp.headers["location"] == "/dashboard"


class TestAuthPages:
    def test_login_form(self, client, api):
        api.register("jane@example.com")
        client.cookies.clear()

        resp = post(client, "/login", {"email": "jane@example.com", "password": "TestPassword123!"})

        assert resp.status_code == 303
        assert resp.headers["location"] == "/dashboard"
        assert resp.cookies.get(COOKIE)

    def test_login_form_bad_password(self, client, api):
        api.register("jane@example.com")
        client.cookies.clear()

        resp = post(client, "/login", {"email": "jane@example.com", "password": "wrong"})

        assert resp.status_code == 401
        assert "Invalid email or password" in resp.text

    def test_register_form_signs_in(self, client):
        resp = post(
            client,
            "/register",
            {
                "email": "new@example.com",
                "password": "Password123!",
                "confirm_password": "Password123!",
                "full_name": "New User",
            },
        )

        assert resp.status_code == 303
        assert resp.headers["location"] == "/dashboard"
        page = get(client, "/dashboard")
        assert page.status_code == 200
        assert "new@example.com" in page.text

    def test_register_form_password_mismatch(self, client):
        resp = post(
            client,
            "/register",
            {"email": "new@example.com", "password": "Password123!", "confirm_password": "Different123!"},
        )

        assert resp.status_code == 400
        assert "Passwords do not match" in resp.text

    def test_logout_clears_session(self, client, user_token):
        resp = post(client, "/logout")

        assert resp.status_code == 303
        assert resp.headers["location"] == "/login"
        assert get(client, "/dashboard").headers["location"] == "/login"


class TestDashboard:
    def test_empty_state(self, client, user_token):
        page = get(client, "/dashboard")

        assert page.status_code == 200
        assert "My Notes" in page.text
        assert "No notes yet. Create your first note to get started!" in page.text
        assert "+ New Note" in page.text
        assert "Admin Dashboard" not in page.text

    def test_admin_sees_admin_link(self, client, admin_token):
        assert "Admin Dashboard" in get(client, "/dashboard").text

    def test_new_note_form_opens(self, client, user_token):
        page = get(client, "/dashboard?new=1")

        assert "Make this note public" in page.text

    def test_create_private_note_scenario(self, client, api, user_token, admin_token):
        api.login("alice@example.com")

        resp = post(client, "/dashboard/notes", {"title": "Test", "content": "Body"})
        assert resp.status_code == 303
        assert resp.headers["location"] == "/dashboard"

        page = get(client, "/dashboard")
        assert "Test" in page.text
        assert "Body" in page.text
        assert ">Public<" not in page.text

        # Not in the admin list filtered to Public Only
        api.login("admin@example.com")
        admin_page = get(client, "/admin?visibility=public")
        assert admin_page.status_code == 200
        assert "No notes found" in admin_page.text
        assert "Total Notes: 0 | Total Users: 2" in admin_page.text

        all_page = get(client, "/admin?visibility=all")
        assert "Total Notes: 1 | Total Users: 2" in all_page.text
        assert "alice@example.com" in all_page.text

    def test_blank_form_is_not_submitted(self, client, api, user_token):
        resp = post(client, "/dashboard/notes", {"title": "   ", "content": "Body"})

        assert resp.status_code == 303
        assert resp.headers["location"] == "/dashboard?new=1"
        assert api.my_notes(user_token) == []

    def test_edit_mode_and_save(self, client, api, user_token):
        note = api.create_note(user_token, "Test", "Body")

        page = get(client, f"/dashboard?edit={note['id']}")
        assert "Save" in page.text and "Cancel" in page.text

        resp = post(client, f"/dashboard/notes/{note['id']}", {"title": "Renamed", "content": "Body"})
        assert resp.headers["location"] == "/dashboard"
        assert api.my_notes(user_token)[0]["title"] == "Renamed"

    def test_unparseable_edit_id_renders_page(self, client, api, user_token):
        api.create_note(user_token, "Test", "Body")

        page = get(client, "/dashboard?edit=junk")

        assert page.status_code == 200
        assert "Test" in page.text
        assert ">Save</button>" not in page.text
        assert "Created:" in page.text

    def test_sign_out_form_uses_logout_path(self, client, user_token):
        page = get(client, "/dashboard")

        assert f'action="{get_settings().logout_path}"' in page.text

    def test_delete_requires_confirmation(self, client, api, user_token):
        note = api.create_note(user_token, "Test", "Body")

        post(client, f"/dashboard/notes/{note['id']}/delete")
        assert len(api.my_notes(user_token)) == 1

        resp = post(client, f"/dashboard/notes/{note['id']}/delete", {"confirm": "yes"})
        assert resp.headers["location"] == "/dashboard"
        assert api.my_notes(user_token) == []

    def test_failed_mutation_redirects_with_error_alert(self, client, api, user_token):
        note = api.create_note(user_token, "Test", "Body")
        post(client, f"/dashboard/notes/{note['id']}/delete", {"confirm": "yes"})

        resp = post(client, f"/dashboard/notes/{note['id']}/delete", {"confirm": "yes"})

        assert resp.status_code == 303
        assert resp.headers["location"] == "/dashboard?error=Error+deleting+note"
        page = get(client, resp.headers["location"])
        assert 'alert("Error deleting note")' in page.text

    def test_cannot_edit_someone_elses_note(self, client, api, user_token):
        note = api.create_note(user_token, "Test", "Body")
        api.signup("bob@example.com")

        resp = post(client, f"/dashboard/notes/{note['id']}", {"title": "Hijacked", "content": "x"})

        assert "error=" in resp.headers["location"]
        assert api.my_notes(user_token)[0]["title"] == "Test"


class TestAdminPage:
    def test_search_and_totals(self, client, api, user_token, admin_token):
        api.create_note(user_token, "Groceries", "milk", is_public=True)
        api.create_note(user_token, "Work", "Quarterly MILK budget")
        api.create_note(admin_token, "Ideas", "nothing here")
        api.login("admin@example.com")

        page = get(client, "/admin?q=milk")

        assert page.status_code == 200
        assert "Total Notes: 2 | Total Users: 2" in page.text
        assert "Groceries" in page.text and "Work" in page.text
        assert "Ideas" not in page.text

    def test_toggle_visibility_keeps_filters(self, client, api, user_token, admin_token):
        note = api.create_note(user_token, "Test", "Body")
        api.login("admin@example.com")

        resp = post(client, f"/admin/notes/{note['id']}/visibility", {"q": "test", "visibility": "private"})

        assert resp.status_code == 303
        assert resp.headers["location"] == "/admin?q=test&visibility=private"
        assert api.my_notes(user_token)[0]["is_public"] is True

        post(client, f"/admin/notes/{note['id']}/visibility")
        assert api.my_notes(user_token)[0]["is_public"] is False

    def test_admin_edit_and_delete(self, client, api, user_token, admin_token):
        note = api.create_note(user_token, "Test", "Body")
        api.login("admin@example.com")

        page = get(client, f"/admin?edit={note['id']}")
        assert "Save" in page.text

        post(client, f"/admin/notes/{note['id']}", {"title": "Moderated", "content": "Body"})
        assert api.my_notes(user_token)[0]["title"] == "Moderated"

        post(client, f"/admin/notes/{note['id']}/delete", {"confirm": "yes"})
        assert api.my_notes(user_token) == []

    def test_unparseable_edit_id_renders_admin_page(self, client, api, user_token, admin_token):
        api.create_note(user_token, "Test", "Body")
        api.login("admin@example.com")

        page = get(client, "/admin?edit=not-a-uuid")

        assert page.status_code == 200
        assert "Total Notes: 1 | Total Users: 2" in page.text

    def test_failed_admin_update_shows_alert(self, client, api, admin_token):
        api.login("admin@example.com")

        resp = post(
            client,
            "/admin/notes/00000000-0000-0000-0000-000000000000",
            {"title": "x", "content": "y", "q": "abc"},
        )

        assert resp.headers["location"] == "/admin?error=Error+updating+note&q=abc"
        assert 'alert("Error updating note")' in get(client, resp.headers["location"]).text
