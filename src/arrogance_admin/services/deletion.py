"""Cascading deletion of a user and everything it owns."""

import asyncio
import logging
from dataclasses import dataclass

from arrogance_admin.domain.deletion import DeletionReport
from arrogance_admin.errors import DeletionError
from arrogance_admin.services.records import (
    EXERCISES,
    HISTORIES,
    PROFILE_RECORDS,
    PROFILES,
    ROUTINES,
    RemoteRecordStore,
)

_TOP_LEVEL_COLLECTIONS = (EXERCISES, HISTORIES, ROUTINES)

_logger = logging.getLogger(__name__)


@dataclass
class CascadingDeletionProtocol:
    """Deletes owned documents first and the identity record last.

    There is no rollback. A failed run leaves earlier deletions in place and
    the identity record untouched; running again picks up what is left
    because every step only deletes documents that still match.
    """

    store: RemoteRecordStore

    async def run(self, user_id: str) -> DeletionReport:
        """Delete ``user_id`` with all of its documents."""
        report = DeletionReport(user_id=user_id)
        _logger.info("Cascading deletion started: user_id=%s", user_id)

        await self._delete_top_level(user_id, report)
        await self._delete_profiles(user_id, report)

        try:
            report.identity_deleted = await self.store.delete_owner_record(user_id)
        except Exception as exc:
            raise DeletionError(user_id, "identity", str(exc)) from exc
        if not report.identity_deleted:
            _logger.info("Identity record already gone: user_id=%s", user_id)

        _logger.info(
            "Cascading deletion finished: user_id=%s documents=%s",
            user_id,
            report.total_documents,
        )
        return report

    async def _delete_top_level(self, user_id: str, report: DeletionReport) -> None:
        # Each collection commits on its own; all three settle before failing.
        results = await asyncio.gather(
            *(
                self._delete_collection(collection, user_id)
                for collection in _TOP_LEVEL_COLLECTIONS
            ),
            return_exceptions=True,
        )
        failure: tuple[str, BaseException] | None = None
        for collection, result in zip(_TOP_LEVEL_COLLECTIONS, results, strict=True):
            if isinstance(result, BaseException):
                _logger.warning(
                    "Deleting %s failed: user_id=%s error=%s",
                    collection,
                    user_id,
                    result,
                )
                failure = failure or (collection, result)
                continue
            report.deleted[collection] = result
        if failure is not None:
            collection, exc = failure
            raise DeletionError(user_id, collection, str(exc)) from exc

    async def _delete_collection(self, collection: str, user_id: str) -> int:
        documents = await self.store.query_by_owner(collection, user_id)
        if not documents:
            return 0
        await self.store.batch_delete(collection, {doc.id for doc in documents})
        return len(documents)

    async def _delete_profiles(self, user_id: str, report: DeletionReport) -> None:
        try:
            profiles = await self.store.query_by_owner(PROFILES, user_id)
        except Exception as exc:
            raise DeletionError(user_id, PROFILES, str(exc)) from exc

        report.deleted[PROFILES] = 0
        for profile in profiles:
            step = f"{PROFILES}/{profile.id}"
            try:
                records = await self.store.query_subcollection(
                    PROFILES, profile.id, PROFILE_RECORDS
                )
                if records:
                    await self.store.batch_delete_subcollection(
                        PROFILES,
                        profile.id,
                        PROFILE_RECORDS,
                        {record.id for record in records},
                    )
                await self.store.batch_delete(PROFILES, {profile.id})
            except Exception as exc:
                raise DeletionError(user_id, step, str(exc)) from exc
            report.profile_records_deleted += len(records)
            report.deleted[PROFILES] += 1
