# lms/models/__init__.py
from lms.models.user import Role, User, Profile, TeacherProfile  # noqa
from lms.models.department import Department  # noqa
from lms.models.course import Course  # noqa
from lms.models.assignment import Assignment, Question, Option  # noqa
from lms.models.enrollment import Enrollment  # noqa
from lms.models.submission import Submission  # noqa
from lms.models.certificate import Certificate  # noqa
from lms.models.payment import Payment  # noqa
