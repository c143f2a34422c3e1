"""Translate Riot match DTOs into cache records.

Keeps Riot's camelCase structures out of the store: a fetched ``MatchDTO``
becomes one ``MatchRecord`` plus one ``ParticipantStat`` per player.
"""

import json

from riftcache.core.riot_api.models import MatchDTO, ParticipantDTO

from .schemas import MatchRecord, ParticipantStat


def match_to_record(match: MatchDTO, cached_at: int) -> MatchRecord:
    """Denormalize the queryable fields and serialize the full payload."""
    info = match.info
    return MatchRecord(
        match_id=match.match_id,
        game_creation=info.game_creation,
        game_duration=info.game_duration,
        game_mode=info.game_mode,
        game_type=info.game_type,
        queue_id=info.queue_id,
        map_id=info.map_id,
        platform_id=info.platform_id,
        game_version=info.game_version,
        data=json.dumps(match.to_payload()),
        created_at=cached_at,
    )


def participant_to_stat(
    match_id: str, participant: ParticipantDTO, created_at: int
) -> ParticipantStat:
    return ParticipantStat(
        match_id=match_id,
        puuid=participant.puuid,
        champion_id=participant.champion_id,
        champion_name=participant.champion_name,
        team_id=participant.team_id,
        role=participant.role,
        win=participant.win,
        kills=participant.kills,
        deaths=participant.deaths,
        assists=participant.assists,
        damage_dealt=participant.total_damage_dealt_to_champions,
        damage_taken=participant.total_damage_taken,
        gold_earned=participant.gold_earned,
        cs=participant.creep_score,
        vision_score=participant.vision_score,
        created_at=created_at,
    )


def flatten_participants(match: MatchDTO, created_at: int) -> list[ParticipantStat]:
    """One stat row per participant, in payload order."""
    return [
        participant_to_stat(match.match_id, participant, created_at)
        for participant in match.info.participants
    ]
