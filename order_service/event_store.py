"""
Order Service — イベントストア

注文の作成をイベントとして追記で記録する(更新・削除はしない)。
(aggregate_id, version) の主キーにより、同じバージョンへの
二重書き込みは制約違反として検知される。
"""

import json
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import DateTime, bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

_INSERT_EVENT = text("""
    INSERT INTO event_store
        (aggregate_id, aggregate_type, event_type, event_data, version, created_at)
    VALUES
        (:agg_id, :agg_type, :evt_type, :evt_data, :version, :now)
""").bindparams(bindparam("now", type_=DateTime(timezone=True)))


async def append_event(
    session: AsyncSession,
    aggregate_id: UUID,
    aggregate_type: str,
    event_type: str,
    event_data: dict,
    expected_version: int,
) -> int:
    """イベントを追記し、新しいバージョン番号を返す。コミットは呼び出し側で行う。"""
    new_version = expected_version + 1
    await session.execute(
        _INSERT_EVENT,
        {
            "agg_id": str(aggregate_id),
            "agg_type": aggregate_type,
            "evt_type": event_type,
            "evt_data": json.dumps(event_data, default=str),
            "version": new_version,
            "now": datetime.now(timezone.utc),
        },
    )
    return new_version


def _decode(event_data):
    return json.loads(event_data) if isinstance(event_data, str) else event_data


async def load_events(session: AsyncSession, aggregate_id: UUID) -> list[dict]:
    result = await session.execute(
        text("""
            SELECT event_type, event_data, version, created_at
            FROM event_store
            WHERE aggregate_id = :agg_id
            ORDER BY version ASC
        """).columns(created_at=DateTime(timezone=True)),
        {"agg_id": str(aggregate_id)},
    )
    return [
        {
            "event_type": row.event_type,
            "event_data": _decode(row.event_data),
            "version": row.version,
            "created_at": row.created_at,
        }
        for row in result.fetchall()
    ]


async def load_all_events(session: AsyncSession) -> list[dict]:
    """すべてのイベントを時系列順に返す(デバッグ用)。"""
    result = await session.execute(
        text("""
            SELECT aggregate_id, aggregate_type, event_type, event_data, version, created_at
            FROM event_store
            ORDER BY created_at ASC, version ASC
        """).columns(created_at=DateTime(timezone=True)),
    )
    return [
        {
            "aggregate_id": row.aggregate_id,
            "aggregate_type": row.aggregate_type,
            "event_type": row.event_type,
            "event_data": _decode(row.event_data),
            "version": row.version,
            "created_at": row.created_at.isoformat() if row.created_at else None,
        }
        for row in result.fetchall()
    ]
