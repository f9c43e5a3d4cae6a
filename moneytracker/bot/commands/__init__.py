from .analytics import analytics_command, send_analytics
from .dashboard import summary_command
from .goal import goal_command, reconcile_command, reset_command
from .transactions import categories_command, delete_command, expense_command, income_command
from .utils import cancel_command, help_command, start_command
