"""HTTP API 통합 테스트.

HTTP API integration tests — team and member endpoints through the
FastAPI app, including paging JSON shape and error status mapping.
"""

from httpx import AsyncClient

from roster.models import Member, Team

API = "/api/v1"


class TestHealth:
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestTeams:
    """팀 엔드포인트 테스트."""

    async def test_create_and_list(self, client: AsyncClient):
        response = await client.post(f"{API}/teams", json={"name": "teamA"})
        assert response.status_code == 201
        team_id = response.json()["id"]

        await client.post(f"{API}/teams", json={"name": "teamB"})
        response = await client.get(f"{API}/teams")
        assert [t["name"] for t in response.json()] == ["teamA", "teamB"]

        response = await client.get(f"{API}/teams/{team_id}")
        assert response.json() == {"id": team_id, "name": "teamA"}

    async def test_get_missing_team(self, client: AsyncClient):
        response = await client.get(f"{API}/teams/999")
        assert response.status_code == 404

    async def test_create_rejects_empty_name(self, client: AsyncClient):
        response = await client.post(f"{API}/teams", json={"name": ""})
        assert response.status_code == 422


class TestMembers:
    """멤버 엔드포인트 테스트."""

    async def test_create_member(self, client: AsyncClient, teams: dict[str, Team]):
        response = await client.post(
            f"{API}/members",
            json={"username": "member1", "age": 10, "team_id": teams["teamA"].id},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "member1"
        assert data["age"] == 10
        assert data["team_id"] == teams["teamA"].id

        response = await client.get(f"{API}/members/{data['id']}")
        assert response.status_code == 200
        assert response.json() == data

    async def test_create_member_with_missing_team(self, client: AsyncClient):
        """존재하지 않는 팀 지정 시 404."""
        response = await client.post(
            f"{API}/members", json={"username": "ghost", "age": 1, "team_id": 404}
        )
        assert response.status_code == 404

    async def test_get_missing_member(self, client: AsyncClient):
        response = await client.get(f"{API}/members/999")
        assert response.status_code == 404

    async def test_assign_team(self, client: AsyncClient, teams: dict[str, Team], team_members: list[Member]):
        member1 = team_members[0]
        response = await client.put(
            f"{API}/members/{member1.id}/team", json={"team_id": teams["teamB"].id}
        )
        assert response.status_code == 200
        assert response.json()["team_id"] == teams["teamB"].id

    async def test_assign_missing_team(self, client: AsyncClient, team_members: list[Member]):
        response = await client.put(f"{API}/members/{team_members[0].id}/team", json={"team_id": 404})
        assert response.status_code == 404

    async def test_member_dtos(self, client: AsyncClient, team_members: list[Member]):
        """팀이 없는 멤버는 team_name이 null."""
        await client.post(f"{API}/members", json={"username": "solo", "age": 30})

        response = await client.get(f"{API}/members/dto")

        assert response.status_code == 200
        assert [(d["username"], d["team_name"]) for d in response.json()] == [
            ("member1", "teamA"), ("member2", "teamB"), ("solo", None),
        ]


class TestMemberPaging:
    """멤버 페이징 엔드포인트 테스트."""

    async def _create_members(self, client: AsyncClient) -> None:
        for i in range(1, 6):
            await client.post(f"{API}/members", json={"username": f"member{i}", "age": 10})

    async def test_paged_list(self, client: AsyncClient):
        await self._create_members(client)

        response = await client.get(
            f"{API}/members", params={"page": 0, "size": 3, "sort": "username,desc", "age": 10}
        )

        assert response.status_code == 200
        data = response.json()
        assert [m["username"] for m in data["content"]] == ["member5", "member4", "member3"]
        assert data["total_elements"] == 5
        assert data["total_pages"] == 2
        assert data["number"] == 0
        assert data["is_first"] is True
        assert data["has_next"] is True

    async def test_repeated_sort_params(self, client: AsyncClient):
        for username, age in [("b", 20), ("a", 20), ("c", 10)]:
            await client.post(f"{API}/members", json={"username": username, "age": age})

        response = await client.get(
            f"{API}/members", params=[("sort", "age,desc"), ("sort", "username")]
        )

        assert [m["username"] for m in response.json()["content"]] == ["a", "b", "c"]

    async def test_page_past_end(self, client: AsyncClient):
        await self._create_members(client)
        response = await client.get(f"{API}/members", params={"page": 9, "size": 3})
        data = response.json()
        assert data["content"] == []
        assert data["total_elements"] == 5
        assert data["has_next"] is False

    async def test_unknown_sort_field(self, client: AsyncClient):
        response = await client.get(f"{API}/members", params={"sort": "nickname"})
        assert response.status_code == 400

    async def test_negative_page(self, client: AsyncClient):
        response = await client.get(f"{API}/members", params={"page": -1})
        assert response.status_code == 400

    async def test_size_above_limit(self, client: AsyncClient):
        response = await client.get(f"{API}/members", params={"size": 10_000})
        assert response.status_code == 400


class TestBulkAgePlus:
    """나이 일괄 증가 엔드포인트 테스트."""

    async def test_bulk_age_plus(self, client: AsyncClient):
        for i, age in enumerate([10, 19, 20, 21, 40], start=1):
            await client.post(f"{API}/members", json={"username": f"member{i}", "age": age})

        response = await client.post(f"{API}/members/bulk-age-plus", json={"min_age": 20})

        assert response.status_code == 200
        assert response.json() == {"affected": 3}
        response = await client.get(f"{API}/members", params={"sort": "username"})
        assert [m["age"] for m in response.json()["content"]] == [10, 19, 21, 22, 41]

    async def test_negative_min_age(self, client: AsyncClient):
        response = await client.post(f"{API}/members/bulk-age-plus", json={"min_age": -1})
        assert response.status_code == 422


class TestLoggingMiddleware:
    """요청 로깅 미들웨어 유틸리티 테스트."""

    def test_mask_sensitive(self):
        from roster.middleware.axiom_logging import mask_sensitive

        masked = mask_sensitive({"username": "a", "api_token": "x", "nested": [{"password": "p"}]})
        assert masked == {"username": "a", "api_token": "***", "nested": [{"password": "***"}]}

    def test_truncate(self):
        from roster.middleware.axiom_logging import truncate

        assert truncate("x" * 10, max_len=4) == "xxxx...(truncated)"
        assert truncate(42) == 42

    def test_resource_of(self):
        from roster.middleware.axiom_logging import resource_of

        assert resource_of("/api/v1/members/3/team") == "members"
        assert resource_of("/api/v1/teams") == "teams"
        assert resource_of("/health") is None
