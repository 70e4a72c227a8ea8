from lms.core.constants import RoleEnum
from lms.core.exceptions import ForbiddenError
from lms.models.assessment import Assessment
from lms.models.assignment import Assignment
from lms.models.course import Course
from lms.schemas.user import UserContext


class PermissionHelper:
    @staticmethod
    def is_teacher(context: UserContext) -> bool:
        return context.user.role == RoleEnum.TEACHER

    @staticmethod
    def is_student(context: UserContext) -> bool:
        return context.user.role == RoleEnum.STUDENT

    @staticmethod
    def is_course_owner(context: UserContext, course: Course) -> bool:
        return course.teacher_id == context.user.id

    @staticmethod
    def is_assessment_owner(context: UserContext, assessment: Assessment) -> bool:
        return assessment.teacher_id == context.user.id

    @staticmethod
    def is_assignment_owner(context: UserContext, assignment: Assignment) -> bool:
        return assignment.teacher_id == context.user.id

    @staticmethod
    def _require_role(context: UserContext, role: RoleEnum):
        if context.user.role != role:
            role_name = getattr(context.user.role, "value", context.user.role)
            raise ForbiddenError(f"User role {role_name} is not authorized to access this route")

    @staticmethod
    def require_teacher(context: UserContext):
        PermissionHelper._require_role(context, RoleEnum.TEACHER)

    @staticmethod
    def require_student(context: UserContext):
        PermissionHelper._require_role(context, RoleEnum.STUDENT)

    @staticmethod
    def require_course_owner(context: UserContext, course: Course, error_message: str = "Not authorized to manage this course"):
        if not PermissionHelper.is_course_owner(context, course):
            raise ForbiddenError(error_message)

    @staticmethod
    def require_assessment_owner(context: UserContext, assessment: Assessment, error_message: str = "Not authorized to manage this assessment"):
        if not PermissionHelper.is_assessment_owner(context, assessment):
            raise ForbiddenError(error_message)

    @staticmethod
    def require_assignment_owner(context: UserContext, assignment: Assignment, error_message: str = "Not authorized to manage this assignment"):
        if not PermissionHelper.is_assignment_owner(context, assignment):
            raise ForbiddenError(error_message)
