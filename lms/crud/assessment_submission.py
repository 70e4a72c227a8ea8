from sqlalchemy.orm import Session, selectinload
from typing import List, Optional

from lms.core.constants import SubmissionStatusEnum
from lms.crud.base import CRUDBase
from lms.models.assessment import Assessment
from lms.models.assessment_submission import AssessmentSubmission
from lms.schemas.assessment_submission import GradeSubmission, SubmitAssessment

class CRUDAssessmentSubmission(CRUDBase[AssessmentSubmission, SubmitAssessment, GradeSubmission]):

    def _query_with_relationships(self, db: Session):
        return db.query(AssessmentSubmission).options(
            selectinload(AssessmentSubmission.answers),
            selectinload(AssessmentSubmission.student),
            selectinload(AssessmentSubmission.assessment).selectinload(Assessment.questions),
            selectinload(AssessmentSubmission.assessment).selectinload(Assessment.course)
        )

    def get(self, db: Session, id: int):
        return self._query_with_relationships(db).filter(AssessmentSubmission.id == id).first()

    def count_by_student_and_assessment(self, db: Session, student_id: int, assessment_id: int) -> int:
        return (
            db.query(AssessmentSubmission)
            .filter(AssessmentSubmission.student_id == student_id)
            .filter(AssessmentSubmission.assessment_id == assessment_id)
            .count()
        )

    def get_latest_by_student_and_assessment(self, db: Session, student_id: int, assessment_id: int) -> Optional[AssessmentSubmission]:
        return (
            self._query_with_relationships(db)
            .filter(AssessmentSubmission.student_id == student_id)
            .filter(AssessmentSubmission.assessment_id == assessment_id)
            .order_by(AssessmentSubmission.attempt_number.desc())
            .first()
        )

    def get_all_by_assessment(self, db: Session, assessment_id: int) -> List[AssessmentSubmission]:
        return (
            self._query_with_relationships(db)
            .filter(AssessmentSubmission.assessment_id == assessment_id)
            .order_by(AssessmentSubmission.submitted_at.desc(), AssessmentSubmission.id.desc())
            .all()
        )

    def get_all_by_student(self, db: Session, student_id: int) -> List[AssessmentSubmission]:
        return (
            self._query_with_relationships(db)
            .filter(AssessmentSubmission.student_id == student_id)
            .order_by(AssessmentSubmission.submitted_at.desc(), AssessmentSubmission.id.desc())
            .all()
        )

    def get_graded_by_assessment(self, db: Session, assessment_id: int) -> List[AssessmentSubmission]:
        return (
            db.query(AssessmentSubmission)
            .filter(AssessmentSubmission.assessment_id == assessment_id)
            .filter(AssessmentSubmission.status == SubmissionStatusEnum.GRADED)
            .all()
        )


assessment_submission = CRUDAssessmentSubmission(AssessmentSubmission)
