from sqlalchemy.orm import Session

from healthcare_api.models.feedback import Feedback


class FeedbackRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_all(self) -> list[Feedback]:
        return self.db.query(Feedback).order_by(Feedback.id.asc()).all()

    def get_by_id(self, feedback_id: int) -> Feedback | None:
        return self.db.query(Feedback).filter(Feedback.id == feedback_id).first()

    def get_by_appointment_id(self, appointment_id: int) -> list[Feedback]:
        return self.db.query(Feedback).filter(
            Feedback.appointment_id == appointment_id,
        ).order_by(Feedback.id.asc()).all()

    def add(self, feedback: Feedback) -> Feedback:
        self.db.add(feedback)
        self.db.commit()
        self.db.refresh(feedback)
        return feedback

    def delete(self, feedback: Feedback) -> None:
        self.db.delete(feedback)
        self.db.commit()
