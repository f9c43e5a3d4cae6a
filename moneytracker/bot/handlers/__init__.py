from .handle_confirmation import handle_confirmation
from .handle_delete_confirmation import handle_delete_confirmation
from .handle_initial_message import handle_initial_message
from .handle_reset_confirmation import handle_reset_confirmation
from .states import ASKING_CONFIRMATION, ASKING_DELETE_CONFIRMATION, ASKING_RESET_CONFIRMATION
