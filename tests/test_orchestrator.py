"""
Tests for read-through cache orchestration.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from riftcache.core.config import RuntimeConfig
from riftcache.core.exceptions import (
    CachedPayloadError,
    NotConfiguredError,
    PersistenceError,
)
from riftcache.core.riot_api import (
    AccountDTO,
    LeagueEntryDTO,
    MatchDTO,
    NotFoundError,
    RiotAPIClient,
    SummonerDTO,
)
from riftcache.features.matches.schemas import MatchRecord
from riftcache.features.matches.transformers import match_to_record
from riftcache.features.players.schemas import PlayerIdentity
from riftcache.orchestrator import CacheOrchestrator


@pytest.fixture
def riot_client():
    """Mocked API client usable as an async context manager."""
    client = AsyncMock(spec=RiotAPIClient)
    client.__aenter__.return_value = client
    client.__aexit__.return_value = False
    return client


@pytest.fixture
def client_factory(riot_client):
    return MagicMock(return_value=riot_client)


@pytest.fixture
def runtime_config():
    return RuntimeConfig(api_key="RGAPI-test", region="euw1")


@pytest.fixture
def orchestrator(store, runtime_config, client_factory):
    return CacheOrchestrator(store, runtime_config, client_factory=client_factory)


def summoner(puuid: str = "puuid-alice", summoner_id: str = "sid-alice") -> SummonerDTO:
    return SummonerDTO(
        id=summoner_id,
        accountId="acc-alice",
        puuid=puuid,
        profileIconId=7,
        summonerLevel=321,
    )


class TestMatchDetails:
    @pytest.mark.asyncio
    async def test_hit_makes_no_client_calls(
        self, orchestrator, store, client_factory, make_match_payload
    ):
        payload = make_match_payload("EUW1_1")
        await store.insert_match(match_to_record(MatchDTO.model_validate(payload), 0))

        result = await orchestrator.get_match_details("EUW1_1")

        assert result == payload
        client_factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_miss_fetches_and_populates(
        self, orchestrator, store, riot_client, make_match_payload
    ):
        payload = make_match_payload("EUW1_1")
        riot_client.get_match.return_value = MatchDTO.model_validate(payload)

        first = await orchestrator.get_match_details("EUW1_1")
        second = await orchestrator.get_match_details("EUW1_1")

        assert first == payload
        assert second == payload
        riot_client.get_match.assert_awaited_once_with("EUW1_1")
        assert await store.match_exists("EUW1_1")
        assert len(await store.get_participant_stats("puuid-alice")) == 1
        assert len(await store.get_participant_stats("puuid-bob")) == 1

    @pytest.mark.asyncio
    async def test_reimport_does_not_duplicate_participants(
        self, orchestrator, store, make_match_payload
    ):
        match = MatchDTO.model_validate(make_match_payload("EUW1_1"))

        assert await orchestrator._persist_match(match) is True
        assert await orchestrator._persist_match(match) is False

        assert len(await store.get_participant_stats("puuid-alice")) == 1

    @pytest.mark.asyncio
    async def test_persist_failure_still_returns_data(
        self, orchestrator, store, riot_client, make_match_payload
    ):
        payload = make_match_payload("EUW1_1")
        riot_client.get_match.return_value = MatchDTO.model_validate(payload)

        with patch.object(
            store, "insert_match", AsyncMock(side_effect=PersistenceError("disk full"))
        ):
            result = await orchestrator.get_match_details("EUW1_1")

        assert result == payload
        assert not await store.match_exists("EUW1_1")

    @pytest.mark.asyncio
    async def test_lookup_failure_is_treated_as_miss(
        self, orchestrator, store, riot_client, make_match_payload
    ):
        payload = make_match_payload("EUW1_1")
        riot_client.get_match.return_value = MatchDTO.model_validate(payload)
        locked = PersistenceError("database is locked", operation="get_match")

        with patch.object(store, "get_match", AsyncMock(side_effect=locked)):
            result = await orchestrator.get_match_details("EUW1_1")

        assert result == payload
        riot_client.get_match.assert_awaited_once_with("EUW1_1")
        assert await store.match_exists("EUW1_1")

    @pytest.mark.asyncio
    async def test_missing_participant_rows_are_regenerated(
        self, orchestrator, store, riot_client, make_match_payload
    ):
        match = MatchDTO.model_validate(make_match_payload("EUW1_9"))
        riot_client.get_match.return_value = match

        with patch.object(
            store,
            "add_participant_stats",
            AsyncMock(side_effect=PersistenceError("disk I/O error")),
        ):
            await orchestrator.get_match_details("EUW1_9")

        assert await store.match_exists("EUW1_9")
        assert not await store.match_has_participants("EUW1_9")

        assert await orchestrator._persist_match(match) is True
        assert await orchestrator._persist_match(match) is False
        assert len(await store.get_participant_stats("puuid-alice")) == 1

    @pytest.mark.asyncio
    async def test_fetch_failure_propagates(self, orchestrator, store, riot_client):
        riot_client.get_match.side_effect = NotFoundError("Resource not found", 404)

        with pytest.raises(NotFoundError):
            await orchestrator.get_match_details("EUW1_404")

        assert not await store.match_exists("EUW1_404")

    @pytest.mark.asyncio
    async def test_miss_without_api_key(self, store, client_factory):
        orchestrator = CacheOrchestrator(store, RuntimeConfig(), client_factory)

        with pytest.raises(NotConfiguredError, match="Please set your API key first"):
            await orchestrator.get_match_details("EUW1_1")

        client_factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_key_change_applies_to_next_call(
        self, orchestrator, runtime_config, client_factory, riot_client, make_match_payload
    ):
        riot_client.get_match.side_effect = [
            MatchDTO.model_validate(make_match_payload("EUW1_1")),
            MatchDTO.model_validate(make_match_payload("EUW1_2")),
        ]

        await orchestrator.get_match_details("EUW1_1")
        await runtime_config.update("RGAPI-new", "na1")
        await orchestrator.get_match_details("EUW1_2")

        first_config = client_factory.call_args_list[0].args[0]
        second_config = client_factory.call_args_list[1].args[0]
        assert (first_config.api_key, first_config.region) == ("RGAPI-test", "euw1")
        assert (second_config.api_key, second_config.region) == ("RGAPI-new", "na1")

    @pytest.mark.asyncio
    async def test_malformed_cached_blob(self, orchestrator, store, client_factory):
        record = match_to_record(
            MatchDTO.model_validate(
                {
                    "metadata": {"matchId": "EUW1_bad", "participants": []},
                    "info": {
                        "gameCreation": 1,
                        "gameDuration": 1,
                        "gameMode": "CLASSIC",
                        "queueId": 420,
                        "mapId": 11,
                        "platformId": "EUW1",
                        "gameVersion": "14.1",
                        "participants": [],
                    },
                }
            ),
            0,
        )
        await store.insert_match(record.model_copy(update={"data": "not json"}))

        with pytest.raises(CachedPayloadError):
            await orchestrator.get_match_details("EUW1_bad")

        client_factory.assert_not_called()


class TestCachedMatches:
    @pytest.mark.asyncio
    async def test_malformed_rows_are_skipped(
        self, orchestrator, store, make_match_payload, make_stat
    ):
        good = make_match_payload("EUW1_good", game_creation=2000)
        await orchestrator._persist_match(MatchDTO.model_validate(good))
        await store.insert_match(
            MatchRecord(
                match_id="EUW1_bad",
                game_creation=3000,
                game_duration=1,
                game_mode="CLASSIC",
                queue_id=420,
                map_id=11,
                platform_id="EUW1",
                game_version="14.1",
                data="[1, 2",
            )
        )
        await store.add_participant_stat(make_stat(match_id="EUW1_bad"))

        payloads = await orchestrator.get_cached_matches("puuid-alice", limit=10)

        assert payloads == [good]

    @pytest.mark.asyncio
    async def test_recent_matches_are_records(self, orchestrator, make_match_payload):
        await orchestrator._persist_match(
            MatchDTO.model_validate(make_match_payload("EUW1_1"))
        )

        recent = await orchestrator.get_recent_matches(5)

        assert recent[0]["match_id"] == "EUW1_1"
        assert recent[0]["queue_id"] == 420


class TestRankedStats:
    @pytest.mark.asyncio
    async def test_refreshes_after_ttl(self, orchestrator, store, clock, riot_client):
        await store.upsert_identity(
            PlayerIdentity(
                puuid="puuid-alice", game_name="Alice", tag_line="EUW", summoner_id="sid-alice"
            )
        )
        riot_client.get_league_entries.return_value = [
            LeagueEntryDTO(queueType="RANKED_FLEX_SR", tier="SILVER", rank="I"),
            LeagueEntryDTO(
                queueType="RANKED_SOLO_5x5", tier="GOLD", rank="II", leaguePoints=55
            ),
        ]

        first = await orchestrator.get_ranked_stats("puuid-alice")
        clock.advance(299)
        second = await orchestrator.get_ranked_stats("puuid-alice")
        clock.advance(1)
        await orchestrator.get_ranked_stats("puuid-alice")

        assert first.tier == "GOLD"
        assert first.league_points == 55
        assert second == first
        assert riot_client.get_league_entries.await_count == 2
        riot_client.get_league_entries.assert_awaited_with("sid-alice")
        riot_client.get_summoner_by_puuid.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_summoner_id_falls_back_to_endpoint(self, orchestrator, riot_client):
        riot_client.get_summoner_by_puuid.return_value = summoner()
        riot_client.get_league_entries.return_value = []

        await orchestrator.get_ranked_stats("puuid-alice")

        riot_client.get_league_entries.assert_awaited_once_with("sid-alice")

    @pytest.mark.asyncio
    async def test_unranked_player_is_cached(self, orchestrator, riot_client):
        riot_client.get_league_entries.return_value = []

        first = await orchestrator.get_ranked_stats("puuid-alice", summoner_id="sid-alice")
        second = await orchestrator.get_ranked_stats("puuid-alice")

        assert first.tier is None
        assert second.tier is None
        riot_client.get_league_entries.assert_awaited_once()


class TestPlayers:
    @pytest.mark.asyncio
    async def test_player_stats_from_cached_rows(self, orchestrator, make_match_payload):
        for i in range(3):
            await orchestrator._persist_match(
                MatchDTO.model_validate(make_match_payload(f"EUW1_{i}"))
            )

        summary = await orchestrator.get_player_stats("puuid-alice")

        assert summary.total_games == 3
        assert summary.wins == 3
        assert summary.avg_cs == pytest.approx(200.0)

    @pytest.mark.asyncio
    async def test_resolve_player_caches_identity(self, orchestrator, store, riot_client):
        riot_client.get_account_by_riot_id.return_value = AccountDTO(
            puuid="puuid-alice", gameName="Alice", tagLine="EUW"
        )
        riot_client.get_summoner_by_puuid.return_value = summoner()

        first = await orchestrator.resolve_player("Alice", "EUW")
        second = await orchestrator.resolve_player("alice", "euw")

        assert first.summoner_id == "sid-alice"
        assert second.puuid == "puuid-alice"
        riot_client.get_account_by_riot_id.assert_awaited_once()
        assert (await store.get_identity("puuid-alice")).summoner_level == 321

    @pytest.mark.asyncio
    async def test_get_summoner_refreshes_stored_identity(
        self, orchestrator, store, riot_client
    ):
        await store.upsert_identity(
            PlayerIdentity(puuid="puuid-alice", game_name="Alice", tag_line="EUW")
        )
        riot_client.get_summoner_by_puuid.return_value = summoner()

        result = await orchestrator.get_summoner("puuid-alice")

        assert result.summoner_level == 321
        identity = await store.get_identity("puuid-alice")
        assert identity.summoner_id == "sid-alice"
        assert identity.game_name == "Alice"


class TestSyncMatchHistory:
    @staticmethod
    def serve_batch(riot_client, payloads):
        async def get_matches_batch(match_ids):
            return [MatchDTO.model_validate(payloads[match_id]) for match_id in match_ids]

        riot_client.get_matches_batch.side_effect = get_matches_batch

    @pytest.mark.asyncio
    async def test_fetches_only_new_matches(
        self, orchestrator, store, riot_client, make_match_payload
    ):
        payloads = {
            f"EUW1_{i}": make_match_payload(f"EUW1_{i}", game_creation=i * 1000)
            for i in range(1, 5)
        }
        self.serve_batch(riot_client, payloads)
        await orchestrator._persist_match(MatchDTO.model_validate(payloads["EUW1_1"]))
        riot_client.get_match_ids.return_value = ["EUW1_3", "EUW1_2", "EUW1_1"]

        first = await orchestrator.sync_match_history("puuid-alice", count=3)

        assert first["fetched"] == 2
        assert first["already_cached"] == 1
        assert first["failed"] == 0
        assert first["total_cached"] == 3
        riot_client.get_matches_batch.assert_awaited_once_with(["EUW1_3", "EUW1_2"])
        metadata = await store.get_sync_metadata("puuid-alice")
        assert metadata.last_match_id == "EUW1_3"

        riot_client.get_matches_batch.reset_mock()
        riot_client.get_match_ids.return_value = ["EUW1_4", "EUW1_3", "EUW1_2"]

        second = await orchestrator.sync_match_history("puuid-alice", count=3)

        assert second["fetched"] == 1
        riot_client.get_matches_batch.assert_awaited_once_with(["EUW1_4"])
        assert (await store.get_sync_metadata("puuid-alice")).total_cached == 4

    @pytest.mark.asyncio
    async def test_repairs_match_without_participant_rows(
        self, orchestrator, store, riot_client, make_match_payload
    ):
        payload = make_match_payload("EUW1_9")
        riot_client.get_match.return_value = MatchDTO.model_validate(payload)
        self.serve_batch(riot_client, {"EUW1_9": payload})
        riot_client.get_match_ids.return_value = ["EUW1_9"]

        with patch.object(
            store,
            "add_participant_stats",
            AsyncMock(side_effect=PersistenceError("disk I/O error")),
        ):
            await orchestrator.get_match_details("EUW1_9")
        assert await orchestrator.get_cached_matches("puuid-alice") == []

        summary = await orchestrator.sync_match_history("puuid-alice", count=1)

        assert summary["fetched"] == 1
        assert summary["already_cached"] == 0
        assert summary["total_cached"] == 1
        assert await orchestrator.get_cached_matches("puuid-alice") == [payload]
        assert (await orchestrator.get_player_stats("puuid-alice")).total_games == 1

    @pytest.mark.asyncio
    async def test_failed_fetch_does_not_abort_sync(
        self, orchestrator, store, riot_client, make_match_payload
    ):
        newest = make_match_payload("EUW1_3", game_creation=3000)
        riot_client.get_match_ids.return_value = ["EUW1_3", "EUW1_2"]
        riot_client.get_matches_batch.return_value = [
            MatchDTO.model_validate(newest),
            NotFoundError("Resource not found", 404),
        ]

        summary = await orchestrator.sync_match_history("puuid-alice", count=2)

        assert summary["fetched"] == 1
        assert summary["failed"] == 1
        assert await store.match_exists("EUW1_3")
        assert summary["last_match_id"] is None

        riot_client.get_matches_batch.reset_mock()
        riot_client.get_matches_batch.return_value = [
            MatchDTO.model_validate(make_match_payload("EUW1_2", game_creation=2000))
        ]

        retry = await orchestrator.sync_match_history("puuid-alice", count=2)

        riot_client.get_matches_batch.assert_awaited_once_with(["EUW1_2"])
        assert retry["fetched"] == 1
        assert retry["already_cached"] == 1
        assert retry["last_match_id"] == "EUW1_3"
