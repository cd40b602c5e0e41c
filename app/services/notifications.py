"""
Push notification fan-out.

Sends run concurrently, bounded by a semaphore. Every send reports back a
DeliveryResult (exceptions included), and the results are applied in one
session afterwards:
  - success            -> AlertRecord appended
  - permanent failure  -> device token removed from the user
  - transient failure  -> logged, no retry
Database work runs in the threadpool so the event loop only waits on sends.
Nothing in here ever raises to the caller.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Optional

from sqlalchemy import exists, select, update
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.db import get_sessionmaker
from app.models.alert import AlertRecord, AlertType
from app.models.freight_job import FreightJob, FreightStatus
from app.models.user import User, UserRole
from app.models.vehicle import Vehicle
from app.providers.push import ExpoPushProvider, PushProvider, PushStatus, StubPushProvider
from app.services.vehicles import normalize_vehicle_type

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PushTarget:
    user_id: str
    token: str


@dataclass(frozen=True)
class DeliveryResult:
    user_id: str
    token: str
    status: PushStatus
    error: str | None = None


def driver_targets(db: Session, vehicle_type: Optional[str] = None) -> list[PushTarget]:
    """Active drivers with a device token, optionally only those owning an active vehicle of the type."""
    q = select(User.id, User.push_token).where(
        User.role == UserRole.DRIVER,
        User.is_active.is_(True),
        User.push_token.is_not(None),
    )
    if vehicle_type:
        q = q.where(
            exists().where(
                Vehicle.owner_id == User.id,
                Vehicle.vehicle_type == normalize_vehicle_type(vehicle_type),
                Vehicle.is_active.is_(True),
            )
        )

    targets: list[PushTarget] = []
    seen: set[str] = set()
    for user_id, token in db.execute(q.order_by(User.created_at.asc(), User.id.asc())):
        if not token or token in seen:
            continue
        seen.add(token)
        targets.append(PushTarget(user_id=user_id, token=token))
    return targets


class NotificationDispatcher:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        provider: PushProvider,
        max_concurrency: int = 10,
    ):
        self.session_factory = session_factory
        self.provider = provider
        self.max_concurrency = max(1, max_concurrency)

    async def notify_new_job(self, job_id: str) -> list[DeliveryResult]:
        """Tell every compatible driver about a freshly created job."""
        try:
            loaded = await run_in_threadpool(self._load_new_job, job_id)
            if loaded is None:
                logger.info("Skipping fan-out, job gone or already taken", extra={"job_id": job_id})
                return []
            targets, title, body, metadata = loaded

            results = await self._fan_out(targets, title, body, metadata)
            await run_in_threadpool(self._apply_results, results, AlertType.NEW_JOB, title, body, job_id)
            return results
        except Exception:
            logger.exception("Fan-out for new job failed", extra={"job_id": job_id})
            return []

    def _load_new_job(self, job_id: str):
        with self.session_factory() as db:
            job = db.get(FreightJob, job_id)
            if job is None or job.status != FreightStatus.AVAILABLE:
                return None
            title = "Novo frete disponível"
            body = f"{job.origin_city}/{job.origin_state} → {job.destination_city}/{job.destination_state} · R$ {job.price:.2f}"
            metadata = {"type": AlertType.NEW_JOB.value, "job_id": job.id, "vehicle_type": job.vehicle_type}
            return driver_targets(db, job.vehicle_type), title, body, metadata

    async def broadcast(
        self,
        title: str,
        message: str,
        user_id: Optional[str] = None,
        vehicle_type: Optional[str] = None,
    ) -> list[DeliveryResult]:
        """Admin notice to one user, or to every driver (optionally by vehicle type)."""
        try:
            targets = await run_in_threadpool(self._load_broadcast_targets, user_id, vehicle_type)
            if not targets:
                logger.info("Broadcast has no reachable device", extra={"user_id": user_id})
                return []

            metadata = {"type": AlertType.NOTICE.value}
            results = await self._fan_out(targets, title, message, metadata)
            await run_in_threadpool(self._apply_results, results, AlertType.NOTICE, title, message)
            return results
        except Exception:
            logger.exception("Broadcast failed")
            return []

    def _load_broadcast_targets(self, user_id: Optional[str], vehicle_type: Optional[str]) -> list[PushTarget]:
        with self.session_factory() as db:
            if not user_id:
                return driver_targets(db, vehicle_type)
            user = db.get(User, user_id)
            if user is None or not user.is_active or not user.push_token:
                return []
            return [PushTarget(user_id=user.id, token=user.push_token)]

    async def _fan_out(
        self,
        targets: list[PushTarget],
        title: str,
        body: str,
        metadata: dict[str, Any],
    ) -> list[DeliveryResult]:
        if not targets:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _deliver(target: PushTarget) -> DeliveryResult:
            async with semaphore:
                try:
                    result = await self.provider.send(target.token, title, body, metadata)
                except Exception as e:
                    # a crashing send counts as a transient failure for that token only
                    logger.warning(f"Push send raised: {e!r}", extra={"user_id": target.user_id})
                    return DeliveryResult(target.user_id, target.token, PushStatus.TRANSIENT_FAILURE, repr(e))
            return DeliveryResult(target.user_id, target.token, result.status, result.error_code)

        return list(await asyncio.gather(*(_deliver(t) for t in targets)))

    def _apply_results(
        self,
        results: list[DeliveryResult],
        alert_type: AlertType,
        title: str,
        message: str,
        job_id: Optional[str] = None,
    ) -> None:
        if not results:
            return

        delivered = pruned = failed = 0
        with self.session_factory() as db:
            for r in results:
                if r.status == PushStatus.SUCCESS:
                    db.add(
                        AlertRecord(
                            id=str(uuid.uuid4()),
                            user_id=r.user_id,
                            alert_type=alert_type.value,
                            job_id=job_id,
                            title=title,
                            message=message,
                        )
                    )
                    delivered += 1
                elif r.status == PushStatus.PERMANENT_FAILURE:
                    # only clear it if the user has not registered a new one meanwhile
                    db.execute(
                        update(User)
                        .where(User.id == r.user_id, User.push_token == r.token)
                        .values(push_token=None, push_platform=None)
                        .execution_options(synchronize_session=False)
                    )
                    logger.info("Pruned dead device token", extra={"user_id": r.user_id, "error": r.error})
                    pruned += 1
                else:
                    logger.warning("Push delivery failed", extra={"user_id": r.user_id, "error": r.error})
                    failed += 1
            db.commit()

        logger.info(
            f"Push fan-out done: {delivered} delivered, {pruned} pruned, {failed} failed",
            extra={"alert_type": alert_type.value, "job_id": job_id},
        )


def build_provider() -> PushProvider:
    if settings.PUSH_PROVIDER == "stub":
        return StubPushProvider()
    return ExpoPushProvider(
        url=settings.EXPO_PUSH_URL,
        access_token=settings.EXPO_ACCESS_TOKEN,
        timeout=settings.PUSH_TIMEOUT_SECONDS,
    )


@functools.lru_cache()
def get_dispatcher() -> NotificationDispatcher:
    """FastAPI dependency (cached): dispatcher bound to the app's sessionmaker."""
    return NotificationDispatcher(
        session_factory=get_sessionmaker(),
        provider=build_provider(),
        max_concurrency=settings.PUSH_MAX_CONCURRENCY,
    )
