"""Tests for comment API endpoints."""

from httpx import AsyncClient


class TestListComments:
    """Tests for the comment visibility and ordering on read."""

    async def test_anonymous_sees_only_anonymous_comments(self, client: AsyncClient) -> None:
        """Test that an anonymous requester only sees ownerless comments."""
        response = await client.get("/api/posts/1/comments")

        assert response.status_code == 200
        data = response.json()
        assert [comment["id"] for comment in data] == [2]
        assert data[0] == {
            "id": 2,
            "text": "Great points raised here. So much to consider.",
            "username": None,
            "date": "2015-10-04 14:44:56",
            "interestingCount": 0,
            "markedByMe": False,
        }

    async def test_authenticated_sees_all_newest_first(self, client: AsyncClient, login) -> None:
        """Test that a logged-in user sees every comment, newest first."""
        await login("emma")

        response = await client.get("/api/posts/1/comments")

        assert response.status_code == 200
        data = response.json()
        assert [comment["id"] for comment in data] == [3, 1, 2]
        assert [comment["username"] for comment in data] == ["diana", "bob", None]

    async def test_anonymous_view_is_subset(self, client: AsyncClient, login) -> None:
        """Test the anonymous view against the authenticated view on every post."""
        anonymous = {}
        for post_id in range(1, 10):
            response = await client.get(f"/api/posts/{post_id}/comments")
            anonymous[post_id] = {comment["id"] for comment in response.json()}

        await login("carl")
        for post_id in range(1, 10):
            response = await client.get(f"/api/posts/{post_id}/comments")
            data = response.json()
            everything = {comment["id"] for comment in data}
            ownerless = {comment["id"] for comment in data if comment["username"] is None}
            assert anonymous[post_id] == ownerless
            assert anonymous[post_id] <= everything

        # Post 6 only has anonymous comments, post 1 has owned ones
        assert anonymous[6] == {16, 17, 18}
        assert len(anonymous[1]) == 1

    async def test_interesting_annotations(self, client: AsyncClient, login) -> None:
        """Test flag counts and the marked-by-me annotation."""
        await login("alberto")

        response = await client.get("/api/posts/4/comments")

        by_id = {comment["id"]: comment for comment in response.json()}
        assert by_id[11]["interestingCount"] == 2
        assert by_id[11]["markedByMe"] is True
        assert by_id[10]["interestingCount"] == 0
        assert by_id[10]["markedByMe"] is False

    async def test_list_comments_post_not_found(self, client: AsyncClient) -> None:
        """Test listing comments of a post that doesn't exist."""
        response = await client.get("/api/posts/999/comments")

        assert response.status_code == 404


class TestCreateComment:
    """Tests for comment creation and the comment ceiling."""

    async def test_create_anonymous_comment(self, client: AsyncClient) -> None:
        """Test that anonymous users may comment and the comment has no author."""
        response = await client.post("/api/posts/3/comments", json={"text": "Anonymous hello"})

        assert response.status_code == 201
        data = response.json()
        assert data["username"] is None
        assert data["text"] == "Anonymous hello"
        assert data["interestingCount"] == 0
        assert data["markedByMe"] is False

        listed = await client.get("/api/posts/3/comments")
        assert listed.json()[0]["id"] == data["id"]

    async def test_create_comment_as_user(self, client: AsyncClient, login) -> None:
        """Test that a logged-in user becomes the comment's author."""
        await login("diana")

        response = await client.post("/api/posts/3/comments", json={"text": "Signed hello"})

        assert response.status_code == 201
        assert response.json()["username"] == "diana"

        # Not visible to anonymous readers
        await client.delete("/api/sessions/current")
        listed = await client.get("/api/posts/3/comments")
        assert response.json()["id"] not in {comment["id"] for comment in listed.json()}

    async def test_comment_limit_reached(self, client: AsyncClient, login) -> None:
        """Test that a post with maxComments=2 holding 2 comments rejects a third."""
        await login("carl")
        created = await client.post(
            "/api/posts", json={"title": "Small Talk", "text": "Two only", "maxComments": 2}
        )
        post_id = created.json()["id"]

        first = await client.post(f"/api/posts/{post_id}/comments", json={"text": "one"})
        second = await client.post(f"/api/posts/{post_id}/comments", json={"text": "two"})
        assert first.status_code == second.status_code == 201

        await client.delete("/api/sessions/current")
        third = await client.post(f"/api/posts/{post_id}/comments", json={"text": "three"})

        assert third.status_code == 403
        assert third.json()["detail"] == "Maximum number of comments reached for this post"
        post = await client.get(f"/api/posts/{post_id}")
        assert post.json()["commentCount"] == 2

    async def test_comment_limit_nth_succeeds(self, client: AsyncClient) -> None:
        """Test that the Nth comment is accepted and the (N+1)th rejected."""
        # Post 1 allows 4 comments and holds 3
        fourth = await client.post("/api/posts/1/comments", json={"text": "fourth"})
        fifth = await client.post("/api/posts/1/comments", json={"text": "fifth"})

        assert fourth.status_code == 201
        assert fifth.status_code == 403

    async def test_comment_limit_zero(self, client: AsyncClient, login) -> None:
        """Test that maxComments=0 closes a post to comments."""
        await login("emma")
        created = await client.post(
            "/api/posts", json={"title": "Closed", "text": "No comments", "maxComments": 0}
        )

        response = await client.post(
            f"/api/posts/{created.json()['id']}/comments", json={"text": "hi"}
        )

        assert response.status_code == 403

    async def test_unbounded_post_never_fills(self, client: AsyncClient) -> None:
        """Test that a post without a ceiling keeps accepting comments."""
        # Post 3 has no maximum
        for i in range(10):
            response = await client.post("/api/posts/3/comments", json={"text": f"#{i}"})
            assert response.status_code == 201

        post = await client.get("/api/posts/3")
        assert post.json()["commentCount"] == 13

    async def test_create_comment_post_not_found(self, client: AsyncClient) -> None:
        """Test commenting on a post that doesn't exist."""
        response = await client.post("/api/posts/999/comments", json={"text": "hello"})

        assert response.status_code == 404

    async def test_create_comment_blank_text(self, client: AsyncClient) -> None:
        """Test commenting with blank text."""
        assert (await client.post("/api/posts/3/comments", json={"text": ""})).status_code == 422
        assert (await client.post("/api/posts/3/comments", json={"text": " "})).status_code == 422
        assert (await client.post("/api/posts/3/comments", json={})).status_code == 422


class TestEditComment:
    """Tests for comment editing."""

    async def test_author_can_edit(self, client: AsyncClient, login) -> None:
        """Test that the author can edit their comment."""
        await login("carl")

        response = await client.put("/api/comments/5", json={"text": "Edited by carl"})

        assert response.status_code == 200
        assert response.json() == {"success": True}
        listed = await client.get("/api/posts/2/comments")
        by_id = {comment["id"]: comment for comment in listed.json()}
        assert by_id[5]["text"] == "Edited by carl"

    async def test_non_author_denied(self, client: AsyncClient, login) -> None:
        """Test that another standard user cannot edit."""
        await login("diana")

        response = await client.put("/api/comments/5", json={"text": "Hijacked"})

        assert response.status_code == 403

    async def test_admin_without_second_factor_denied(self, client: AsyncClient, login) -> None:
        """Test that a password-only admin session is a standard session."""
        await login("alberto")

        response = await client.put("/api/comments/5", json={"text": "Moderated"})

        assert response.status_code == 403

    async def test_elevated_admin_can_edit_any(self, client: AsyncClient, login_elevated) -> None:
        """Test that an elevated admin can edit other users' and anonymous comments."""
        await login_elevated("alberto")

        assert (await client.put("/api/comments/5", json={"text": "Mod"})).status_code == 200
        assert (await client.put("/api/comments/6", json={"text": "Mod"})).status_code == 200

    async def test_anonymous_comment_not_editable_by_standard_user(
        self, client: AsyncClient, login
    ) -> None:
        """Test that nobody owns an anonymous comment."""
        await login("diana")

        response = await client.put("/api/comments/6", json={"text": "Mine now"})

        assert response.status_code == 403

    async def test_edit_unauthenticated(self, client: AsyncClient) -> None:
        """Test editing without a session."""
        response = await client.put("/api/comments/6", json={"text": "anon edit"})

        assert response.status_code == 401

    async def test_edit_not_found(self, client: AsyncClient, login) -> None:
        """Test editing a comment that doesn't exist."""
        await login("carl")

        response = await client.put("/api/comments/999", json={"text": "ghost"})

        assert response.status_code == 404

    async def test_edit_blank_text(self, client: AsyncClient, login) -> None:
        """Test editing with blank text."""
        await login("carl")

        response = await client.put("/api/comments/5", json={"text": "   "})

        assert response.status_code == 422


class TestDeleteComment:
    """Tests for comment deletion."""

    async def test_elevated_admin_deletes_other_users_comment(
        self, client: AsyncClient, login_elevated
    ) -> None:
        """Test alberto, elevated, deleting a comment owned by carl."""
        await login_elevated("alberto")

        response = await client.delete("/api/comments/5")

        assert response.status_code == 200
        listed = await client.get("/api/posts/2/comments")
        assert 5 not in {comment["id"] for comment in listed.json()}

    async def test_standard_non_owner_denied(self, client: AsyncClient, login) -> None:
        """Test diana, standard and not the owner, deleting carl's comment."""
        await login("diana")

        response = await client.delete("/api/comments/14")

        assert response.status_code == 403
        listed = await client.get("/api/posts/5/comments")
        assert 14 in {comment["id"] for comment in listed.json()}

    async def test_author_can_delete(self, client: AsyncClient, login) -> None:
        """Test that the author can delete their comment."""
        await login("carl")

        response = await client.delete("/api/comments/14")

        assert response.status_code == 200

    async def test_delete_frees_a_slot(self, client: AsyncClient, login) -> None:
        """Test that the ceiling is computed from the current comment count."""
        await login("bob")
        # Post 1 allows 4: fill it, then free a slot by deleting bob's comment
        assert (await client.post("/api/posts/1/comments", json={"text": "4"})).status_code == 201
        assert (await client.post("/api/posts/1/comments", json={"text": "5"})).status_code == 403

        assert (await client.delete("/api/comments/1")).status_code == 200

        assert (await client.post("/api/posts/1/comments", json={"text": "5"})).status_code == 201

    async def test_delete_twice(self, client: AsyncClient, login) -> None:
        """Test that a second delete of the same comment reports not found."""
        await login("carl")

        assert (await client.delete("/api/comments/14")).status_code == 200
        assert (await client.delete("/api/comments/14")).status_code == 404

    async def test_comment_id_out_of_storage_range(self, client: AsyncClient, login) -> None:
        """Test that ids beyond a 64-bit integer fail validation."""
        await login("carl")

        assert (await client.delete("/api/comments/99999999999999999999")).status_code == 422
        assert (await client.put(f"/api/comments/{2**63}", json={"text": "x"})).status_code == 422
        assert (await client.post(f"/api/comments/{2**63}/interesting")).status_code == 422
        assert (await client.delete(f"/api/comments/{2**63 - 1}")).status_code == 404

    async def test_delete_unauthenticated(self, client: AsyncClient) -> None:
        """Test deleting without a session."""
        response = await client.delete("/api/comments/6")

        assert response.status_code == 401
