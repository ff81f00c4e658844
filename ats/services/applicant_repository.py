"""
Applicant Repository - ApplicantRecord storage in MongoDB.

Documents keep the camelCase keys used by the frontend and the PDF form.
Records are never deleted; they move between statuses.

Routes depend on the ApplicantRepository interface; MongoApplicantRepository
is the implementation wired in by ats.api.deps.
"""

import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from ats.core.exceptions import DuplicateApplicantError
from ats.db.mongodb import COLLECTIONS, get_collection

SEARCH_FIELDS = ("name", "email", "registrationNumber", "presentInstitute", "cpf")


def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    """Convert MongoDB document to a JSON-serializable dict with 'id'."""
    if doc is None:
        return None
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    return doc


def _object_id(applicant_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(applicant_id)
    except (InvalidId, TypeError):
        return None


class ApplicantRepository(ABC):

    @abstractmethod
    def create(self, record: dict) -> dict:
        """Insert record; raises DuplicateApplicantError on a known email."""

    @abstractmethod
    def get(self, applicant_id: str) -> Optional[dict]: ...

    @abstractmethod
    def get_by_email(self, email: str) -> Optional[dict]: ...

    @abstractmethod
    def list(self, status: Optional[str] = None, search: Optional[str] = None,
             skip: int = 0, limit: int = 50) -> Tuple[List[dict], int]:
        """Return (page of records newest first, total matching)."""

    @abstractmethod
    def update(self, applicant_id: str, fields: dict) -> Optional[dict]: ...

    @abstractmethod
    def set_status(self, applicant_id: str, status: str, processed_by: str,
                   expected_current: Optional[str] = None) -> Optional[dict]:
        """
        Change status. When expected_current is given, the write only happens
        if the stored status still equals it; otherwise None is returned.
        """

    @abstractmethod
    def count_by_status(self) -> Dict[str, int]: ...

    @abstractmethod
    def next_registration_number(self, year: int) -> str:
        """Allocate the next SAIL-<year>-<NNNN> number."""


class MongoApplicantRepository(ApplicantRepository):

    def __init__(self, collection: Collection = None, counters: Collection = None):
        self.collection: Collection = collection if collection is not None else get_collection(COLLECTIONS["applicants"])
        self.counters: Collection = counters if counters is not None else get_collection(COLLECTIONS["counters"])

    def create(self, record: dict) -> dict:
        doc = dict(record)
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError as e:
            raise DuplicateApplicantError(record.get("email", "")) from e
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    def get(self, applicant_id: str) -> Optional[dict]:
        oid = _object_id(applicant_id)
        if oid is None:
            return None
        return serialize_doc(self.collection.find_one({"_id": oid}))

    def get_by_email(self, email: str) -> Optional[dict]:
        return serialize_doc(self.collection.find_one({"email": email.lower()}))

    def list(self, status: Optional[str] = None, search: Optional[str] = None,
             skip: int = 0, limit: int = 50) -> Tuple[List[dict], int]:
        query: dict = {}
        if status:
            query["status"] = status
        if search:
            pattern = {"$regex": re.escape(search.strip()), "$options": "i"}
            query["$or"] = [{field: pattern} for field in SEARCH_FIELDS]

        total = self.collection.count_documents(query)
        cursor = (
            self.collection.find(query)
            .sort("uploadDate", DESCENDING)
            .skip(skip)
            .limit(limit)
        )
        return [serialize_doc(doc) for doc in cursor], total

    def update(self, applicant_id: str, fields: dict) -> Optional[dict]:
        oid = _object_id(applicant_id)
        if oid is None:
            return None
        try:
            doc = self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise DuplicateApplicantError(fields.get("email", "")) from e
        return serialize_doc(doc)

    def set_status(self, applicant_id: str, status: str, processed_by: str,
                   expected_current: Optional[str] = None) -> Optional[dict]:
        oid = _object_id(applicant_id)
        if oid is None:
            return None
        query = {"_id": oid}
        if expected_current is not None:
            query["status"] = expected_current
        doc = self.collection.find_one_and_update(
            query,
            {"$set": {
                "status": status,
                "processedBy": processed_by,
                "statusUpdatedAt": datetime.utcnow(),
            }},
            return_document=ReturnDocument.AFTER,
        )
        return serialize_doc(doc)

    def count_by_status(self) -> Dict[str, int]:
        pipeline = [{"$group": {"_id": "$status", "count": {"$sum": 1}}}]
        return {row["_id"]: row["count"] for row in self.collection.aggregate(pipeline)}

    def next_registration_number(self, year: int) -> str:
        counter = self.counters.find_one_and_update(
            {"_id": f"registration-{year}"},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return f"SAIL-{year}-{counter['seq']:04d}"
