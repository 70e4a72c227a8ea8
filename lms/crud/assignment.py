from sqlalchemy.orm import Session, selectinload
from typing import List, Optional

from lms.core.constants import AssignmentStatusEnum
from lms.crud.base import CRUDBase
from lms.models.assignment import Assignment
from lms.schemas.assignment import AssignmentCreate, AssignmentUpdate, dump_file_links


class CRUDAssignment(CRUDBase[Assignment, AssignmentCreate, AssignmentUpdate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Assignment).options(
            selectinload(Assignment.course),
            selectinload(Assignment.teacher)
        )

    def get(self, db: Session, id: int):
        return self._query_with_relationships(db).filter(Assignment.id == id).first()

    def create_with_teacher(self, db: Session, *, obj_in: AssignmentCreate, teacher_id: int, commit: bool = True) -> Assignment:
        obj_in_data = obj_in.model_dump(exclude={"attachments"})
        obj_in_data["attachments"] = dump_file_links(obj_in.attachments)
        return self.create(db, obj_in={**obj_in_data, "teacher_id": teacher_id}, commit=commit)

    def update_assignment(self, db: Session, *, db_obj: Assignment, obj_in: AssignmentUpdate, commit: bool = True) -> Assignment:
        update_data = obj_in.model_dump(exclude_unset=True, exclude={"attachments"})
        if obj_in.attachments is not None:
            update_data["attachments"] = dump_file_links(obj_in.attachments)
        return self.update(db, db_obj=db_obj, obj_in=update_data, commit=commit)

    def get_by_course(
        self,
        db: Session,
        course_id: int,
        teacher_id: Optional[int] = None,
        include_drafts: bool = False
    ) -> List[Assignment]:
        query = self._query_with_relationships(db).filter(Assignment.course_id == course_id)
        if teacher_id is not None:
            query = query.filter(Assignment.teacher_id == teacher_id)
        if not include_drafts:
            query = query.filter(Assignment.status != AssignmentStatusEnum.DRAFT)
        return query.order_by(Assignment.due_date.asc(), Assignment.id.asc()).all()

    def get_by_teacher(self, db: Session, teacher_id: int) -> List[Assignment]:
        return (
            self._query_with_relationships(db)
            .filter(Assignment.teacher_id == teacher_id)
            .order_by(Assignment.due_date.asc(), Assignment.id.asc())
            .all()
        )

    def get_visible_for_courses(self, db: Session, course_ids: List[int]) -> List[Assignment]:
        if not course_ids:
            return []
        return (
            self._query_with_relationships(db)
            .filter(Assignment.course_id.in_(course_ids))
            .filter(Assignment.status != AssignmentStatusEnum.DRAFT)
            .order_by(Assignment.due_date.asc(), Assignment.id.asc())
            .all()
        )


assignment = CRUDAssignment(Assignment)
