# External field-observation sync
from __future__ import annotations
import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..errors import FiscalizaError
from ..lib.dates import utcnow
from ..models import FieldObservation
from ..schemas import InspectionRecord
from ..storage import StorageService

logger = logging.getLogger(__name__)


class ObservationSync:
    """
    Mirrors new inspections into the external field_observations table, which
    only knows observation text, photo URL, address and the two party names.
    Best effort: failures are logged and the inspection itself is unaffected.
    """

    def __init__(self, session_factory: sessionmaker, storage: Optional[StorageService] = None):
        self.session_factory = session_factory
        self.storage = storage

    def _upload_first_attachment(self, record: InspectionRecord) -> Optional[str]:
        if not self.storage or not record.attachments:
            return None
        first = record.attachments[0]
        key = f"fotos/{int(utcnow().timestamp() * 1000)}-{first.name}"
        try:
            return self.storage.upload_data_uri(first.data, key)
        except FiscalizaError as e:
            logger.warning("Attachment upload failed for %s: %s", record.protocol, e)
            return None

    def push(self, record: InspectionRecord) -> Optional[str]:
        photo_url = self._upload_first_attachment(record)
        try:
            with self.session_factory() as db:
                row = FieldObservation(
                    inspection_id=record.id,
                    observation=record.description,
                    photo_url=photo_url,
                    address=record.address,
                    complainant_name=record.complainant_name,
                    respondent_name=record.respondent_name,
                )
                db.add(row)
                db.commit()
                return row.id
        except SQLAlchemyError as e:
            logger.warning("Could not record field observation for %s: %s", record.protocol, e)
            return None
