from app.models.daily_report import DailyReport, OfficialHoliday  # noqa: F401
from app.models.employee import Employee  # noqa: F401
from app.models.feedback import Feedback, FeedbackSubject  # noqa: F401
from app.models.target import EmployeeTarget, TargetStatus  # noqa: F401
