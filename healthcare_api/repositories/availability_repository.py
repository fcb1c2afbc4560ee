from sqlalchemy.orm import Session

from healthcare_api.models.availability import Availability


class AvailabilityRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> list[Availability]:
        return self.db.query(Availability).order_by(Availability.id.asc()).all()

    def get_by_id(self, availability_id: int) -> Availability | None:
        return self.db.query(Availability).filter(Availability.id == availability_id).first()

    def get_by_caregiver_id(self, caregiver_id: int) -> list[Availability]:
        return self.db.query(Availability).filter(
            Availability.caregiver_id == caregiver_id,
        ).order_by(Availability.id.asc()).all()

    def add(self, availability: Availability) -> Availability:
        self.db.add(availability)
        self.db.commit()
        self.db.refresh(availability)
        return availability

    def replace_slots(self, availability: Availability, slots: list[dict]) -> Availability:
        # Assign a new list so the JSON column is flagged as changed.
        availability.available_slots = list(slots)
        self.db.commit()
        self.db.refresh(availability)
        return availability

    def delete(self, availability: Availability) -> None:
        self.db.delete(availability)
        self.db.commit()
