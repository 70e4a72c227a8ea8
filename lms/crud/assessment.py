from sqlalchemy.orm import Session, selectinload
from typing import List, Optional

from lms.core.constants import AssessmentStatusEnum
from lms.crud.base import CRUDBase
from lms.models.assessment import Assessment, Question
from lms.schemas.assessment import AssessmentCreate, AssessmentUpdate
from lms.schemas.question import QuestionCreate


class CRUDAssessment(CRUDBase[Assessment, AssessmentCreate, AssessmentUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Assessment).options(
            selectinload(Assessment.questions),
            selectinload(Assessment.course),
            selectinload(Assessment.teacher)
        )

    def _build_questions(self, questions_in: List[QuestionCreate]) -> List[Question]:
        return [Question(**q.model_dump()) for q in questions_in]

    def get(self, db: Session, id: int):
        return self._query_with_relationships(db).filter(Assessment.id == id).first()

    def create_with_teacher(self, db: Session, *, obj_in: AssessmentCreate, teacher_id: int, commit: bool = True) -> Assessment:
        obj_in_data = obj_in.model_dump(exclude={"questions"})
        if obj_in_data.get("start_date") is None:
            obj_in_data.pop("start_date", None)
        db_obj = Assessment(**obj_in_data, teacher_id=teacher_id)
        db_obj.questions = self._build_questions(obj_in.questions)
        db.add(db_obj)
        db.flush()
        if commit:
            db.commit()
        db.refresh(db_obj)
        return db_obj

    def update_with_questions(self, db: Session, *, db_obj: Assessment, obj_in: AssessmentUpdate, commit: bool = True) -> Assessment:
        update_data = obj_in.model_dump(exclude_unset=True, exclude={"questions"})
        for field, value in update_data.items():
            setattr(db_obj, field, value)
        if obj_in.questions is not None:
            db_obj.questions = self._build_questions(obj_in.questions)
        db.add(db_obj)
        db.flush()
        if commit:
            db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_by_course(
        self,
        db: Session,
        course_id: int,
        teacher_id: Optional[int] = None,
        include_drafts: bool = False
    ) -> List[Assessment]:
        query = self._query_with_relationships(db).filter(Assessment.course_id == course_id)
        if teacher_id is not None:
            query = query.filter(Assessment.teacher_id == teacher_id)
        if not include_drafts:
            query = query.filter(Assessment.status != AssessmentStatusEnum.DRAFT)
        return query.order_by(Assessment.due_date.asc(), Assessment.id.asc()).all()


assessment = CRUDAssessment(Assessment)
